"""
Aggregation of entries into timeframe buckets.

All functions are pure and operate on one owner's full entry collection.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from acclog.journal.models import Entry, Granularity
from acclog.journal.timekeys import bucket_key


@dataclass(frozen=True)
class BucketStats:
    """Summary statistics for one bucket."""

    count: int
    average_rating: float


def distinct_keys(entries: Iterable[Entry], granularity: Granularity | str) -> list[str]:
    """Unique bucket keys, newest first (descending lexicographic order)."""
    return sorted({bucket_key(e.timestamp, granularity) for e in entries}, reverse=True)


def bucket_entries(
    entries: Iterable[Entry], key: str, granularity: Granularity | str
) -> list[Entry]:
    """Entries whose bucket key equals `key`, most recent first.

    sorted() is stable, so entries with equal timestamps keep their
    original relative order.
    """
    matching = [e for e in entries if bucket_key(e.timestamp, granularity) == key]
    return sorted(matching, key=lambda e: e.timestamp, reverse=True)


def stats(entries: Iterable[Entry]) -> BucketStats:
    ratings = [e.rating for e in entries]
    if not ratings:
        return BucketStats(count=0, average_rating=0.0)
    return BucketStats(count=len(ratings), average_rating=sum(ratings) / len(ratings))


def entry_ids(entries: Iterable[Entry]) -> frozenset[str]:
    return frozenset(e.id for e in entries)
