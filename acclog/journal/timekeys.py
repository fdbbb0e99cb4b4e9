"""
Timeframe bucket keys.

Keys are zero-padded so that lexicographic order equals chronological order:
"YYYY-MM" for months, "YYYY" for years. A key depends only on the calendar
fields of the timestamp as given; no timezone conversion happens here.
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime

from acclog.errors import ValidationError
from acclog.journal.models import Granularity

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")
_YEAR_KEY = re.compile(r"^(\d{4})$")


def bucket_key(timestamp: datetime, granularity: Granularity | str) -> str:
    """Map a timestamp to its bucket key for the given granularity."""
    if Granularity.parse(granularity) is Granularity.YEAR:
        return f"{timestamp.year:04d}"
    return f"{timestamp.year:04d}-{timestamp.month:02d}"


def parse_bucket_key(key: str, granularity: Granularity | str) -> tuple[int, int | None]:
    """
    Split a bucket key into (year, month). Month is None for year keys.

    Raises:
        ValidationError: If the key does not match the granularity's format
    """
    granularity = Granularity.parse(granularity)
    if granularity is Granularity.YEAR:
        match = _YEAR_KEY.match(key or "")
        if not match:
            raise ValidationError(f"Invalid year key {key!r}. Expected YYYY")
        return int(match.group(1)), None

    match = _MONTH_KEY.match(key or "")
    if not match:
        raise ValidationError(f"Invalid month key {key!r}. Expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month key {key!r}. Month must be 01-12")
    return year, month


def bucket_label(key: str, granularity: Granularity | str) -> str:
    """Human-readable label: "February 2026" for months, "2026" for years."""
    year, month = parse_bucket_key(key, granularity)
    if month is None:
        return str(year)
    return f"{calendar.month_name[month]} {year}"


def format_relative_time(instant: datetime, now: datetime) -> str:
    """Short "generated ... ago" text for insight footers."""
    diff = (now - instant).total_seconds()
    minutes = int(diff // 60)
    hours = int(diff // 3600)
    days = int(diff // 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{hours} hr ago"
    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"
    return instant.strftime("%Y-%m-%d")
