"""Journal service layer: facade between callers (API, CLI) and the store.

Centralizes owner scoping, input validation and the "no storage configured"
degradation so routes and commands stay thin.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from acclog.errors import NotConfiguredError
from acclog.journal.aggregator import BucketStats, bucket_entries, distinct_keys, stats
from acclog.journal.models import Entry, EntryCreate, Granularity
from acclog.journal.navigator import BucketNavigator
from acclog.journal.timekeys import bucket_label, parse_bucket_key
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter
from acclog.storage.ports import JournalStore

logger = get_logger(__name__)


@dataclass
class TimeframeSummary:
    """One bucket in a timeframe listing."""

    key: str
    label: str
    stats: BucketStats


@dataclass
class BucketView:
    """The selected bucket with its neighbours for prev/next navigation."""

    granularity: Granularity
    key: str
    label: str
    entries: list[Entry]
    stats: BucketStats
    previous_key: str | None = None
    next_key: str | None = None
    all_keys: list[str] = field(default_factory=list)


class JournalService:
    """Owner-scoped journal operations.

    With no store configured, reads degrade to empty results and writes
    raise NotConfiguredError.
    """

    def __init__(self, store: JournalStore | None, owner_id: str) -> None:
        self.store = store
        self.owner_id = owner_id

    def list_entries(self) -> list[Entry]:
        if self.store is None:
            counter("journal.store.not_configured")
            return []
        return self.store.list_entries(self.owner_id)

    def add_entry(self, text: Any, rating: Any, timestamp: Any = None) -> Entry:
        """Validate and persist a new entry.

        Raises:
            ValidationError: Empty text, rating outside 1..10 or an unparseable
                timestamp (nothing stored)
            NotConfiguredError: No store configured
        """
        entry_create = EntryCreate.build(text, rating, timestamp)
        if self.store is None:
            raise NotConfiguredError("Entry storage is not configured")
        entry = self.store.add_entry(self.owner_id, entry_create)
        counter("journal.entries.created")
        return entry

    def timeframes(self, granularity: Granularity | str) -> list[TimeframeSummary]:
        granularity = Granularity.parse(granularity)
        entries = self.list_entries()
        return [
            TimeframeSummary(
                key=key,
                label=bucket_label(key, granularity),
                stats=stats(bucket_entries(entries, key, granularity)),
            )
            for key in distinct_keys(entries, granularity)
        ]

    def navigator(self, granularity: Granularity | str = Granularity.MONTH) -> BucketNavigator:
        return BucketNavigator(self.list_entries(), granularity)

    def bucket(self, granularity: Granularity | str, key: str | None = None) -> BucketView | None:
        """
        View of one bucket. With no key, the most recent bucket is used.

        Returns None only when the owner has no entries and no key was given.
        A well-formed key with no entries yields an empty view.
        """
        granularity = Granularity.parse(granularity)
        nav = self.navigator(granularity)

        if key is None:
            key = nav.selected_key
            if key is None:
                return None
        else:
            parse_bucket_key(key, granularity)

        keys = nav.keys
        if key in keys:
            nav.select(key)
            entries = nav.current_entries
            previous_key = keys[keys.index(key) + 1] if nav.has_previous else None
            next_key = keys[keys.index(key) - 1] if nav.has_next else None
        else:
            entries = []
            previous_key = next_key = None

        return BucketView(
            granularity=granularity,
            key=key,
            label=bucket_label(key, granularity),
            entries=entries,
            stats=stats(entries),
            previous_key=previous_key,
            next_key=next_key,
            all_keys=keys,
        )
