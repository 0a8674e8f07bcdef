"""
Dashboard aggregates over policies.

Every function takes an iterable of policies and a reference ``now`` so the
figures are reproducible; the API passes querysets and the current time.
"""

from collections import Counter, OrderedDict, namedtuple
from datetime import date

from django.core.exceptions import ValidationError

from . import expiry_service

PERIOD_WEEK = 'week'
PERIOD_MONTH = 'month'
PERIOD_YEAR = 'year'
PERIODS = (PERIOD_WEEK, PERIOD_MONTH, PERIOD_YEAR)

PALETTE = (
    'hsl(var(--primary))',
    'hsl(var(--success))',
    'hsl(var(--warning))',
    'hsl(var(--destructive))',
)

TrendPoint = namedtuple('TrendPoint', ['label', 'active', 'expired', 'renewed'])


def summarize(policies, now=None):
    """
    Count policies per dashboard figure.

    ``expiring`` covers the today, week and month buckets, so
    ``active + expiring + expired == created``.
    """
    counts = Counter(expiry_service.classify(p.expiry_date, now) for p in policies)
    return {
        'created': sum(counts.values()),
        'active': counts[expiry_service.ACTIVE],
        'expiring': sum(counts[b] for b in expiry_service.EXPIRING_BUCKETS),
        'expired': counts[expiry_service.EXPIRED],
    }


def _period_key(day: date, period):
    if period == PERIOD_WEEK:
        iso = day.isocalendar()
        return (iso[0], iso[1])
    if period == PERIOD_MONTH:
        return (day.year, day.month)
    return (day.year,)


def period_label(day, period):
    """``2026-W42``, ``Oct 2026`` or ``2026``."""
    day = expiry_service.to_date(day, field='date')
    if period == PERIOD_WEEK:
        year, week = _period_key(day, period)
        return f"{year}-W{week:02d}"
    if period == PERIOD_MONTH:
        return day.strftime('%b %Y')
    return str(day.year)


def trends(policies, period, now=None, renewals=()):
    """
    Per-period counts, oldest period first.

    Policies are grouped by the period of their expiry date and counted as
    active or expired on ``now``. ``renewals`` is an iterable of renewal
    dates; each one counts towards the period it falls in.

    Raises:
        ValidationError: unknown period.
    """
    if period not in PERIODS:
        raise ValidationError({'period': f"Invalid period: {period!r}. Expected one of {', '.join(PERIODS)}."})

    buckets = {}

    def _slot(day):
        key = _period_key(day, period)
        if key not in buckets:
            buckets[key] = {'label': period_label(day, period), 'active': 0, 'expired': 0, 'renewed': 0}
        return buckets[key]

    for policy in policies:
        slot = _slot(policy.expiry_date)
        if expiry_service.classify(policy.expiry_date, now) == expiry_service.EXPIRED:
            slot['expired'] += 1
        else:
            slot['active'] += 1

    for renewed in renewals:
        if renewed:
            _slot(expiry_service.to_date(renewed, field='renewed_date'))['renewed'] += 1

    return [TrendPoint(**buckets[key]) for key in sorted(buckets)]


def company_distribution(policies):
    """Policy count per insurer with a dashboard colour, largest first."""
    counts = Counter(p.company for p in policies)
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        {'name': name, 'value': value, 'color': PALETTE[index % len(PALETTE)]}
        for index, (name, value) in enumerate(ordered)
    ]


def expiry_report(policies, now=None, company=None):
    """
    Policies split into the today/week/month/expired report tabs.

    Expiring tabs are ordered by expiry ascending; ``expired`` is ordered
    most recently expired first and each row carries ``days_overdue``.
    Active policies are not reported.
    """
    today = expiry_service.today_for(now)
    if company and str(company).lower() != 'all':
        wanted = str(company).lower()
        policies = [p for p in policies if p.company.lower() == wanted]

    report = OrderedDict((bucket, []) for bucket in (
        expiry_service.TODAY, expiry_service.WEEK, expiry_service.MONTH, expiry_service.EXPIRED,
    ))
    for policy in sorted(policies, key=lambda p: (p.expiry_date, p.pk or 0)):
        bucket = expiry_service.classify(policy.expiry_date, today)
        if bucket not in report:
            continue
        row = {
            'id': policy.pk,
            'plate': policy.plate,
            'owner': policy.owner,
            'contact': policy.contact,
            'company': policy.company,
            'start_date': policy.start_date,
            'expiry_date': policy.expiry_date,
            'renewed_date': policy.renewed_date,
            'followup_status': policy.followup_status,
        }
        if bucket == expiry_service.EXPIRED:
            row['days_overdue'] = (today - policy.expiry_date).days
        report[bucket].append(row)

    report[expiry_service.EXPIRED].reverse()
    return dict(report)


def sidebar_counts():
    """Navigation badge counts."""
    from django.contrib.auth import get_user_model
    from apps.core.models import Policy

    return {
        'policies': Policy.objects.count(),
        'users': get_user_model().objects.count(),
    }
