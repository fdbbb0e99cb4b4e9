"""
Pytest configuration for journal tests

Provides a recording insight generator, an in-memory store and an entry
factory shared across unit and integration tests.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime

import pytest

from acclog.journal.models import Entry
from acclog.observability.telemetry import reset_counters
from acclog.storage.memory import InMemoryJournalStore


class FakeGenerator:
    """InsightGenerator double that records calls.

    Set `error` to make summarize() raise, or `gate` to a threading.Event to
    hold summarize() until the test releases it.
    """

    def __init__(self, response: str = "You had a focused, high-impact month.") -> None:
        self.response = response
        self.calls: list[tuple[list[Entry], object, str]] = []
        self.compliments: list[tuple[str, int]] = []
        self.error: Exception | None = None
        self.gate: threading.Event | None = None
        self.started = threading.Event()

    def summarize(self, entries, timeframe_type, timeframe_key) -> str:
        self.calls.append((list(entries), timeframe_type, timeframe_key))
        self.started.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.response

    def compliment(self, text: str, rating: int) -> str:
        self.compliments.append((text, rating))
        return "Nice work."


@pytest.fixture(autouse=True)
def _reset_telemetry():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def memory_store() -> InMemoryJournalStore:
    return InMemoryJournalStore()


@pytest.fixture
def make_entry():
    """Factory for Entry objects with sequential ids ("e1", "e2", ...)."""
    ids = itertools.count(1)

    def _make(when: str, rating: int = 5, text: str = "Did a thing", entry_id: str | None = None):
        return Entry(
            id=entry_id or f"e{next(ids)}",
            text=text,
            rating=rating,
            timestamp=datetime.fromisoformat(when),
        )

    return _make
