"""Storage collaborator contract consumed by the journal core."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from acclog.journal.models import Entry, EntryCreate, Granularity, Insight


@runtime_checkable
class JournalStore(Protocol):
    """
    Owner-scoped document store for entries and cached insights.

    Implementations never expose one owner's records to another. Insight
    writes are upserts keyed by the composite insight id and land atomically.
    """

    def list_entries(self, owner_id: str) -> list[Entry]: ...

    def add_entry(self, owner_id: str, entry: EntryCreate) -> Entry: ...

    def get_insight(
        self, owner_id: str, timeframe_type: Granularity, timeframe_key: str
    ) -> Insight | None: ...

    def put_insight(
        self,
        owner_id: str,
        timeframe_type: Granularity,
        timeframe_key: str,
        content: str,
        entry_ids: Iterable[str],
        generated_at: datetime,
    ) -> Insight: ...
