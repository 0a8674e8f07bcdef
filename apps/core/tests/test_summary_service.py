from datetime import date, timedelta

import pytest
from django.core.exceptions import ValidationError

from apps.core.services import summary_service
from tests.factories import FollowUpFactory, PolicyFactory

TODAY = date(2026, 10, 19)


def _policy(offset, **kwargs):
    return PolicyFactory.build(expiry_date=TODAY + timedelta(days=offset), **kwargs)


class TestSummarize:
    def test_expired_today_week(self):
        policies = [_policy(-1), _policy(0), _policy(5)]
        assert summary_service.summarize(policies, TODAY) == {
            'created': 3, 'active': 0, 'expiring': 2, 'expired': 1,
        }

    def test_month_bucket_counts_as_expiring(self):
        summary = summary_service.summarize([_policy(20), _policy(100)], TODAY)
        assert summary['expiring'] == 1
        assert summary['active'] == 1

    def test_counts_always_sum_to_created(self):
        policies = [_policy(offset) for offset in range(-15, 50, 3)]
        summary = summary_service.summarize(policies, TODAY)
        assert summary['active'] + summary['expiring'] + summary['expired'] == summary['created']

    def test_empty(self):
        assert summary_service.summarize([], TODAY) == {'created': 0, 'active': 0, 'expiring': 0, 'expired': 0}


class TestTrends:
    def test_monthly_grouping_oldest_first(self):
        policies = [
            PolicyFactory.build(expiry_date=date(2026, 9, 10)),
            PolicyFactory.build(expiry_date=date(2026, 9, 28)),
            PolicyFactory.build(expiry_date=date(2026, 11, 2)),
        ]
        points = summary_service.trends(policies, 'month', TODAY, renewals=[date(2026, 11, 15)])

        assert [p.label for p in points] == ['Sep 2026', 'Nov 2026']
        assert points[0] == summary_service.TrendPoint('Sep 2026', active=0, expired=2, renewed=0)
        assert points[1] == summary_service.TrendPoint('Nov 2026', active=1, expired=0, renewed=1)

    def test_week_labels_are_iso_weeks(self):
        points = summary_service.trends([PolicyFactory.build(expiry_date=TODAY)], 'week', TODAY)
        assert points[0].label == '2026-W43'

    def test_year(self):
        points = summary_service.trends(
            [PolicyFactory.build(expiry_date=date(2025, 3, 1)), PolicyFactory.build(expiry_date=date(2027, 1, 1))],
            'year',
            TODAY,
        )
        assert [(p.label, p.active, p.expired) for p in points] == [('2025', 0, 1), ('2027', 1, 0)]

    def test_invalid_period(self):
        with pytest.raises(ValidationError):
            summary_service.trends([], 'decade', TODAY)


def test_company_distribution_cycles_palette():
    policies = [PolicyFactory.build(company=name) for name in ['A', 'A', 'B', 'C', 'D', 'E']]
    rows = summary_service.company_distribution(policies)

    assert rows[0] == {'name': 'A', 'value': 2, 'color': 'hsl(var(--primary))'}
    assert [r['name'] for r in rows] == ['A', 'B', 'C', 'D', 'E']
    assert rows[4]['color'] == rows[0]['color']


@pytest.mark.django_db
class TestExpiryReport:
    def test_tabs_and_ordering(self):
        old = PolicyFactory(expiry_date=TODAY - timedelta(days=10))
        recent = PolicyFactory(expiry_date=TODAY - timedelta(days=2))
        due_today = PolicyFactory(expiry_date=TODAY)
        week_late = PolicyFactory(expiry_date=TODAY + timedelta(days=6))
        week_early = PolicyFactory(expiry_date=TODAY + timedelta(days=2))
        month = PolicyFactory(expiry_date=TODAY + timedelta(days=25))
        PolicyFactory(expiry_date=TODAY + timedelta(days=90))

        report = summary_service.expiry_report(PolicyFactory._meta.model.objects.with_followup(), TODAY)

        assert [r['id'] for r in report['today']] == [due_today.pk]
        assert [r['id'] for r in report['week']] == [week_early.pk, week_late.pk]
        assert [r['id'] for r in report['month']] == [month.pk]
        assert [r['id'] for r in report['expired']] == [recent.pk, old.pk]
        assert report['expired'][0]['days_overdue'] == 2
        assert 'days_overdue' not in report['week'][0]

    def test_company_filter_and_followup_status(self):
        soras = PolicyFactory(expiry_date=TODAY, company='SORAS')
        PolicyFactory(expiry_date=TODAY, company='RADIANT')
        FollowUpFactory(policy=soras, followup_status='confirmed')

        report = summary_service.expiry_report(PolicyFactory._meta.model.objects.with_followup(), TODAY, 'soras')

        assert len(report['today']) == 1
        assert report['today'][0]['followup_status'] == 'confirmed'
