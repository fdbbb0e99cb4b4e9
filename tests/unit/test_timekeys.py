"""Unit tests for bucket keys, labels and relative time formatting"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from acclog.errors import ValidationError
from acclog.journal.models import Granularity
from acclog.journal.timekeys import bucket_key, bucket_label, format_relative_time, parse_bucket_key


class TestBucketKey:
    def test_month_key_is_zero_padded(self):
        assert bucket_key(datetime(2026, 2, 14, 9, 30), Granularity.MONTH) == "2026-02"

    def test_year_key(self):
        assert bucket_key(datetime(2026, 2, 14), Granularity.YEAR) == "2026"

    def test_accepts_string_granularity(self):
        assert bucket_key(datetime(2025, 11, 1), "month") == "2025-11"

    def test_uses_calendar_fields_as_given(self):
        """Late evening in UTC-5 stays in that day's month, no conversion to UTC"""
        eastern = timezone(timedelta(hours=-5))
        ts = datetime(2026, 1, 31, 22, 0, tzinfo=eastern)
        assert bucket_key(ts, Granularity.MONTH) == "2026-01"

    def test_lexicographic_order_is_chronological(self):
        keys = [bucket_key(datetime(y, m, 1), "month") for y, m in [(2026, 1), (2025, 12)]]
        assert sorted(keys) == ["2025-12", "2026-01"]

    def test_rejects_unknown_granularity(self):
        with pytest.raises(ValidationError):
            bucket_key(datetime(2026, 1, 1), "week")


class TestParseBucketKey:
    def test_month(self):
        assert parse_bucket_key("2026-02", Granularity.MONTH) == (2026, 2)

    def test_year(self):
        assert parse_bucket_key("2026", Granularity.YEAR) == (2026, None)

    @pytest.mark.parametrize(
        "key", ["2026-2", "2026", "2026-13", "2026-00", "26-02", "", "abcd-ef"]
    )
    def test_invalid_month_keys(self, key):
        with pytest.raises(ValidationError):
            parse_bucket_key(key, Granularity.MONTH)

    @pytest.mark.parametrize("key", ["2026-02", "26", "20266"])
    def test_invalid_year_keys(self, key):
        with pytest.raises(ValidationError):
            parse_bucket_key(key, Granularity.YEAR)


def test_bucket_label_month():
    assert bucket_label("2026-02", Granularity.MONTH) == "February 2026"


def test_bucket_label_year():
    assert bucket_label("2026", Granularity.YEAR) == "2026"


class TestFormatRelativeTime:
    now = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

    def test_just_now(self):
        assert format_relative_time(self.now - timedelta(seconds=30), self.now) == "just now"

    def test_minutes(self):
        assert format_relative_time(self.now - timedelta(minutes=5), self.now) == "5 min ago"

    def test_hours(self):
        assert format_relative_time(self.now - timedelta(hours=3), self.now) == "3 hr ago"

    def test_one_day(self):
        assert format_relative_time(self.now - timedelta(days=1), self.now) == "1 day ago"

    def test_days(self):
        assert format_relative_time(self.now - timedelta(days=4), self.now) == "4 days ago"

    def test_falls_back_to_date_after_a_week(self):
        assert format_relative_time(self.now - timedelta(days=10), self.now) == "2026-02-28"
