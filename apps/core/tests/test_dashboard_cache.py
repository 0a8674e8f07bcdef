from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from apps.core.dashboard_cache import DashboardCache
from apps.core.services import followup_service, lifecycle_service
from tests.factories import PolicyFactory


class TestDashboardCache:
    def test_computes_once_per_generation(self):
        dc = DashboardCache(backend=cache, timeout=60)
        calls = []

        def compute():
            calls.append(1)
            return {'created': len(calls)}

        assert dc.get_or_set('summary', compute) == {'created': 1}
        assert dc.get_or_set('summary', compute) == {'created': 1}

        dc.invalidate()
        assert dc.get_or_set('summary', compute) == {'created': 2}

    def test_parts_are_separate_entries(self):
        dc = DashboardCache(backend=cache, timeout=60)
        assert dc.get_or_set('trends', lambda: 'week', 'week') == 'week'
        assert dc.get_or_set('trends', lambda: 'month', 'month') == 'month'

    def test_zero_timeout_disables_caching(self):
        dc = DashboardCache(backend=cache, timeout=0)
        values = iter([1, 2])
        assert dc.get_or_set('summary', lambda: next(values)) == 1
        assert dc.get_or_set('summary', lambda: next(values)) == 2

    def test_invalidate_without_generation_key(self):
        dc = DashboardCache(backend=cache, timeout=60)
        dc.invalidate()
        assert dc.generation() == 2


@pytest.mark.django_db
class TestWritesInvalidateDashboard:
    def test_followup_write_bumps_generation(self, django_capture_on_commit_callbacks):
        dc = DashboardCache(backend=cache, timeout=60)
        before = dc.generation()
        policy = PolicyFactory()

        with django_capture_on_commit_callbacks(execute=True):
            followup_service.set_status(policy.pk, 'pending')

        assert dc.generation() == before + 1

    def test_renewal_bumps_generation(self, django_capture_on_commit_callbacks):
        dc = DashboardCache(backend=cache, timeout=60)
        before = dc.generation()
        policy = PolicyFactory(days=-2)

        with django_capture_on_commit_callbacks(execute=True):
            lifecycle_service.renew(policy.pk, timezone.localdate() + timedelta(days=90))

        assert dc.generation() > before
