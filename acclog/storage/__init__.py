"""Storage - owner-scoped entry and insight persistence"""

from __future__ import annotations

from acclog.storage.memory import InMemoryJournalStore
from acclog.storage.ports import JournalStore
from acclog.storage.sqlite_store import SQLiteJournalStore

__all__ = ["InMemoryJournalStore", "JournalStore", "SQLiteJournalStore"]
