"""
Short-lived cache for dashboard aggregates.

Keys carry a generation number and the local date. Any policy write bumps
the generation (see receivers.py), which orphans every cached aggregate at
once; the date component rolls buckets over at midnight without a write.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)

GENERATION_KEY = 'dashboard:generation'


class DashboardCache:
    """
    Get-or-compute wrapper around Django's cache for dashboard endpoints.
    """

    def __init__(self, backend=None, timeout=None):
        self.backend = backend or cache
        self.timeout = timeout if timeout is not None else getattr(settings, 'DASHBOARD_CACHE_TIMEOUT', 60)

    def generation(self):
        value = self.backend.get(GENERATION_KEY)
        if value is None:
            self.backend.add(GENERATION_KEY, 1, None)
            value = self.backend.get(GENERATION_KEY, 1)
        return value

    def key(self, name, *parts):
        suffix = ':'.join(str(p) for p in parts if p not in (None, ''))
        base = f"dashboard:{self.generation()}:{timezone.localdate().isoformat()}:{name}"
        return f"{base}:{suffix}" if suffix else base

    def get_or_set(self, name, compute, *parts):
        """Return the cached value for ``name``/``parts``, computing it on a miss."""
        if not self.timeout:
            return compute()
        key = self.key(name, *parts)
        value = self.backend.get(key)
        if value is None:
            value = compute()
            self.backend.set(key, value, self.timeout)
        return value

    def invalidate(self):
        """Drop every cached aggregate by moving to a new generation."""
        try:
            self.backend.incr(GENERATION_KEY)
        except ValueError:
            # Generation key evicted or never set
            self.backend.set(GENERATION_KEY, 2, None)
        logger.debug("Dashboard cache invalidated")


dashboard_cache = DashboardCache()
