"""Text-generation collaborator contract."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from acclog.journal.models import Entry, Granularity


@runtime_checkable
class InsightGenerator(Protocol):
    """
    Single request/response summarizer.

    Raises TransientGenerationError for rate limits and network failures,
    PermanentGenerationError for auth/config failures and NotConfiguredError
    when no backend is available.
    """

    def summarize(
        self, entries: Sequence[Entry], timeframe_type: Granularity, timeframe_key: str
    ) -> str: ...
