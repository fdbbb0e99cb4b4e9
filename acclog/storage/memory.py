"""
In-memory journal store.

Used when no database is configured and as the test double for the core.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterable
from datetime import datetime

from acclog.journal.models import Entry, EntryCreate, Granularity, Insight, insight_id
from acclog.observability.logging import get_logger

logger = get_logger(__name__)


class InMemoryJournalStore:
    """Dict-backed JournalStore, isolated per owner."""

    def __init__(self) -> None:
        self._entries: dict[str, list[Entry]] = {}
        self._insights: dict[str, dict[str, Insight]] = {}
        self._lock = threading.Lock()

    def list_entries(self, owner_id: str) -> list[Entry]:
        with self._lock:
            entries = list(self._entries.get(owner_id, []))
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    def add_entry(self, owner_id: str, entry: EntryCreate) -> Entry:
        created = entry.to_entry(str(uuid.uuid4()))
        with self._lock:
            self._entries.setdefault(owner_id, []).append(created)
        logger.debug("Stored entry %s for owner %s", created.id, owner_id)
        return created

    def get_insight(
        self, owner_id: str, timeframe_type: Granularity, timeframe_key: str
    ) -> Insight | None:
        with self._lock:
            return self._insights.get(owner_id, {}).get(
                insight_id(timeframe_type, timeframe_key)
            )

    def put_insight(
        self,
        owner_id: str,
        timeframe_type: Granularity,
        timeframe_key: str,
        content: str,
        entry_ids: Iterable[str],
        generated_at: datetime,
    ) -> Insight:
        ids = sorted(set(entry_ids))
        insight = Insight(
            id=insight_id(timeframe_type, timeframe_key),
            timeframe_type=timeframe_type,
            timeframe_key=timeframe_key,
            content=content,
            generated_at=generated_at,
            accomplishment_count=len(ids),
            accomplishment_ids=ids,
        )
        with self._lock:
            self._insights.setdefault(owner_id, {})[insight.id] = insight
        return insight
