from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest
from django.core.exceptions import ValidationError

from apps.core.services import expiry_service as es

TODAY = date(2026, 10, 19)


class TestClassify:
    @pytest.mark.parametrize("offset, bucket", [
        (-1, es.EXPIRED),
        (-400, es.EXPIRED),
        (0, es.TODAY),
        (1, es.WEEK),
        (5, es.WEEK),
        (7, es.WEEK),
        (8, es.MONTH),
        (20, es.MONTH),
        (30, es.MONTH),
        (31, es.ACTIVE),
        (100, es.ACTIVE),
    ])
    def test_boundaries(self, offset, bucket):
        assert es.classify(TODAY + timedelta(days=offset), TODAY) == bucket

    def test_exactly_one_bucket_over_a_range(self):
        for offset in range(-40, 60):
            assert es.classify(TODAY + timedelta(days=offset), TODAY) in es.BUCKETS

    def test_buckets_agree_with_bounds(self):
        for offset in range(-10, 45):
            day = TODAY + timedelta(days=offset)
            bucket = es.classify(day, TODAY)
            lower, upper = es.bucket_bounds(bucket, TODAY)
            assert lower is None or day >= lower
            assert upper is None or day <= upper

    def test_iso_strings_accepted(self):
        assert es.classify("2026-10-19", "2026-10-19") == es.TODAY

    def test_aware_now_uses_local_calendar_date(self):
        # 23:30 UTC on the 18th is already the 19th in Kigali (UTC+2)
        now = datetime(2026, 10, 18, 23, 30, tzinfo=dt_timezone.utc)
        assert es.classify(TODAY, now) == es.TODAY

    def test_pure(self):
        assert es.classify(TODAY, TODAY) == es.classify(TODAY, TODAY)

    def test_invalid_date_rejected(self):
        with pytest.raises(ValidationError):
            es.classify("19/10/2026", TODAY)

    def test_missing_date_rejected(self):
        with pytest.raises(ValidationError):
            es.classify(None, TODAY)

    @pytest.mark.parametrize("raw", [
        "2026-10-19 not a date",
        "2026-12-31junk",
        "2026-02-30",
        "   ",
    ])
    def test_malformed_strings_rejected(self, raw):
        with pytest.raises(ValidationError):
            es.to_date(raw)

    def test_datetime_strings_use_their_date(self):
        assert es.to_date("2026-10-19T08:15:00") == TODAY
        assert es.to_date(" 2026-10-19 ") == TODAY


class TestBucketBounds:
    def test_month_starts_after_week(self):
        assert es.bucket_bounds(es.MONTH, TODAY) == (TODAY + timedelta(days=8), TODAY + timedelta(days=30))

    def test_open_ends(self):
        assert es.bucket_bounds(es.EXPIRED, TODAY)[0] is None
        assert es.bucket_bounds(es.ACTIVE, TODAY)[1] is None

    def test_unknown_bucket(self):
        with pytest.raises(ValidationError):
            es.bucket_bounds('soon', TODAY)


def test_days_until_expiry():
    assert es.days_until_expiry(TODAY + timedelta(days=3), TODAY) == 3
    assert es.days_until_expiry(TODAY - timedelta(days=2), TODAY) == -2
