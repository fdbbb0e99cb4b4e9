"""
Insight cache over the storage collaborator.

One record per (timeframeType, timeframeKey) for an owner. A record remembers
the exact entry ids it was generated from; it is stale as soon as the live
bucket's id set differs in any way.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime

from acclog.errors import NotConfiguredError
from acclog.journal.models import Granularity, Insight, utc_now
from acclog.journal.timekeys import parse_bucket_key
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter
from acclog.storage.ports import JournalStore

logger = get_logger(__name__)


def is_stale(insight: Insight, current_entry_ids: Iterable[str]) -> bool:
    """True iff the insight's source ids differ from the current ids (set inequality)."""
    return insight.entry_id_set != frozenset(current_entry_ids)


class InsightCache:
    """
    Owner-scoped insight lookup and upsert.

    With no store configured, lookups degrade to a miss and writes raise
    NotConfiguredError.
    """

    def __init__(
        self,
        store: JournalStore | None,
        owner_id: str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self.owner_id = owner_id
        self._clock = clock

    @property
    def configured(self) -> bool:
        return self._store is not None

    def lookup(self, timeframe_type: Granularity | str, timeframe_key: str) -> Insight | None:
        """Cached insight for the exact (type, key) pair, or None on a miss."""
        timeframe_type = Granularity.parse(timeframe_type)
        parse_bucket_key(timeframe_key, timeframe_type)

        if self._store is None:
            counter("insights.cache.not_configured")
            return None

        insight = self._store.get_insight(self.owner_id, timeframe_type, timeframe_key)
        counter("insights.cache.hit" if insight else "insights.cache.miss")
        return insight

    is_stale = staticmethod(is_stale)

    def store(
        self,
        timeframe_type: Granularity | str,
        timeframe_key: str,
        content: str,
        entry_ids: Iterable[str],
    ) -> Insight:
        """Stamp generated_at now and upsert at "{type}_{key}", replacing any prior record."""
        timeframe_type = Granularity.parse(timeframe_type)
        parse_bucket_key(timeframe_key, timeframe_type)

        if self._store is None:
            raise NotConfiguredError("Insight storage is not configured")

        insight = self._store.put_insight(
            self.owner_id,
            timeframe_type,
            timeframe_key,
            content,
            list(entry_ids),
            self._clock(),
        )
        counter("insights.cache.store")
        return insight
