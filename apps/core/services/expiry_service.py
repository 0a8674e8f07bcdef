"""
Expiry classification for policies.

A policy's bucket is a pure function of its expiry date and a reference
"now". Buckets partition the date line around today:

    expired | today | week (1-7 days) | month (8-30 days) | active (31+ days)

Comparisons are made between calendar dates in the configured TIME_ZONE,
never between instants, so a policy expiring today stays in "today" from
local midnight to local midnight.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from django.core.exceptions import ValidationError
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

EXPIRED = 'expired'
TODAY = 'today'
WEEK = 'week'
MONTH = 'month'
ACTIVE = 'active'

BUCKETS = (EXPIRED, TODAY, WEEK, MONTH, ACTIVE)

# The summary's "expiring" figure is exactly these three buckets.
EXPIRING_BUCKETS = (TODAY, WEEK, MONTH)

WEEK_DAYS = 7
MONTH_DAYS = 30


def to_date(value, field='expiry_date') -> date:
    """
    Coerce a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` (aware values are converted to local time
    first), ISO ``YYYY-MM-DD`` strings and ISO datetime strings. The whole
    string must parse; trailing text is rejected.

    Raises:
        ValidationError: If the value is missing or not a valid date.
    """
    if value is None or value == '':
        raise ValidationError({field: 'This date is required.'})
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localtime(value).date()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_date(text) or parse_datetime(text)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ValidationError({field: f'Invalid date: {value!r}. Use YYYY-MM-DD.'})
        return to_date(parsed, field)
    raise ValidationError({field: f'Invalid date: {value!r}.'})


def today_for(now=None) -> date:
    """Calendar date of ``now`` (defaults to the current local date)."""
    if now is None:
        return timezone.localdate()
    return to_date(now, field='now')


def days_until_expiry(expiry_date, now=None) -> int:
    """Whole days from today until expiry; negative once expired."""
    return (to_date(expiry_date) - today_for(now)).days


def classify(expiry_date, now=None) -> str:
    """
    Return the single bucket ``expiry_date`` falls into relative to ``now``.

    Args:
        expiry_date: date, datetime or ISO string.
        now: reference date/datetime; the current local date when omitted.

    Returns:
        One of BUCKETS.
    """
    days = days_until_expiry(expiry_date, now)
    if days < 0:
        return EXPIRED
    if days == 0:
        return TODAY
    if days <= WEEK_DAYS:
        return WEEK
    if days <= MONTH_DAYS:
        return MONTH
    return ACTIVE


def bucket_bounds(bucket, today) -> Tuple[Optional[date], Optional[date]]:
    """
    Inclusive ``(lower, upper)`` expiry-date bounds of a bucket.

    An open side is ``None``. Used to filter querysets with exactly the same
    boundaries as ``classify``.
    """
    today = to_date(today, field='today')
    if bucket == EXPIRED:
        return None, today - timedelta(days=1)
    if bucket == TODAY:
        return today, today
    if bucket == WEEK:
        return today + timedelta(days=1), today + timedelta(days=WEEK_DAYS)
    if bucket == MONTH:
        return today + timedelta(days=WEEK_DAYS + 1), today + timedelta(days=MONTH_DAYS)
    if bucket == ACTIVE:
        return today + timedelta(days=MONTH_DAYS + 1), None
    raise ValidationError({'bucket': f'Unknown bucket: {bucket!r}. Expected one of {", ".join(BUCKETS)}.'})


def is_expiring(bucket) -> bool:
    return bucket in EXPIRING_BUCKETS
