from django.dispatch import receiver

from .dashboard_cache import dashboard_cache
from .signals import policy_changed


@receiver(policy_changed, dispatch_uid='core.invalidate_dashboard_cache')
def invalidate_dashboard_cache(sender, policy_id=None, action=None, **kwargs):
    dashboard_cache.invalidate()
