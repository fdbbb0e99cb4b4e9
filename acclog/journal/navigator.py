"""
Bucket navigation state.

Callers drive the navigator with explicit events (entries changed,
granularity changed, bucket selected, step) instead of re-deriving state on
every render. Keys are held newest first, so "previous" means older and
moves towards the end of the sequence.
"""

from __future__ import annotations

from collections.abc import Iterable

from acclog.errors import NavigationError
from acclog.journal.aggregator import BucketStats, bucket_entries, distinct_keys, stats
from acclog.journal.models import Entry, Granularity
from acclog.journal.timekeys import bucket_label


class BucketNavigator:
    """Tracks the selected timeframe bucket for one owner's entries."""

    def __init__(
        self,
        entries: Iterable[Entry] = (),
        granularity: Granularity | str = Granularity.MONTH,
    ) -> None:
        self._entries: list[Entry] = list(entries)
        self._granularity = Granularity.parse(granularity)
        self._keys: list[str] = []
        self._selected_key: str | None = None
        self._refresh()

    @property
    def granularity(self) -> Granularity:
        return self._granularity

    @property
    def selected_key(self) -> str | None:
        return self._selected_key

    @property
    def keys(self) -> list[str]:
        return list(self._keys)

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    def _refresh(self) -> None:
        self._keys = distinct_keys(self._entries, self._granularity)
        if self._selected_key not in self._keys:
            self._selected_key = self._keys[0] if self._keys else None

    def _index(self) -> int:
        if self._selected_key is None:
            return -1
        return self._keys.index(self._selected_key)

    # Events

    def set_entries(self, entries: Iterable[Entry]) -> None:
        """Replace the entry collection; keeps the selection if its key survives."""
        self._entries = list(entries)
        self._refresh()

    def set_granularity(self, granularity: Granularity | str) -> None:
        """Switch granularity and re-select the most recent bucket."""
        self._granularity = Granularity.parse(granularity)
        # The old selection is never mapped onto the new granularity
        self._selected_key = None
        self._refresh()

    def select(self, key: str) -> None:
        if key not in self._keys:
            raise NavigationError(f"No {self._granularity.value} bucket {key!r}")
        self._selected_key = key

    # Stepping

    @property
    def has_previous(self) -> bool:
        index = self._index()
        return 0 <= index < len(self._keys) - 1

    @property
    def has_next(self) -> bool:
        return self._index() > 0

    def step_previous(self) -> str:
        """Move to the next-older bucket."""
        if not self.has_previous:
            raise NavigationError("Already at the oldest bucket")
        self._selected_key = self._keys[self._index() + 1]
        return self._selected_key

    def step_next(self) -> str:
        """Move to the next-newer bucket."""
        if not self.has_next:
            raise NavigationError("Already at the most recent bucket")
        self._selected_key = self._keys[self._index() - 1]
        return self._selected_key

    # Views of the selected bucket

    @property
    def current_entries(self) -> list[Entry]:
        if self._selected_key is None:
            return []
        return bucket_entries(self._entries, self._selected_key, self._granularity)

    @property
    def current_stats(self) -> BucketStats:
        return stats(self.current_entries)

    @property
    def current_label(self) -> str | None:
        if self._selected_key is None:
            return None
        return bucket_label(self._selected_key, self._granularity)
