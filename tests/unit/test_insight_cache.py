"""Unit tests for the insight cache and staleness detection"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from acclog.errors import NotConfiguredError, ValidationError
from acclog.insights.cache import InsightCache, is_stale
from acclog.journal.models import Granularity, Insight
from acclog.observability.telemetry import get_counter

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def cache(memory_store):
    return InsightCache(memory_store, "user-1", clock=lambda: FIXED_NOW)


def _insight(ids):
    return Insight(
        id="month_2026-02",
        timeframe_type=Granularity.MONTH,
        timeframe_key="2026-02",
        content="x",
        generated_at=FIXED_NOW,
        accomplishment_count=len(ids),
        accomplishment_ids=list(ids),
    )


class TestIsStale:
    def test_same_ids_in_any_order_are_fresh(self):
        assert is_stale(_insight(["a", "b"]), ["b", "a"]) is False

    def test_added_entry_is_stale(self):
        assert is_stale(_insight(["a", "b"]), ["a", "b", "c"]) is True

    def test_removed_entry_is_stale(self):
        assert is_stale(_insight(["a", "b"]), ["a"]) is True

    def test_swapped_entry_is_stale(self):
        assert is_stale(_insight(["a", "b"]), ["a", "c"]) is True

    def test_both_empty_is_fresh(self):
        assert is_stale(_insight([]), []) is False


def test_lookup_miss_returns_none(cache):
    assert cache.lookup(Granularity.MONTH, "2026-02") is None
    assert get_counter("insights.cache.miss") == 1


def test_store_then_lookup(cache):
    stored = cache.store(Granularity.MONTH, "2026-02", "Great month.", ["b", "a"])

    found = cache.lookup("month", "2026-02")

    assert found == stored
    assert found.id == "month_2026-02"
    assert found.generated_at == FIXED_NOW
    assert found.accomplishment_count == 2
    assert found.entry_id_set == frozenset({"a", "b"})


def test_store_overwrites_previous_record(cache):
    cache.store(Granularity.MONTH, "2026-02", "First take.", ["a"])
    cache.store(Granularity.MONTH, "2026-02", "Second take.", ["a", "b"])

    found = cache.lookup(Granularity.MONTH, "2026-02")

    assert found.content == "Second take."
    assert found.accomplishment_ids == ["a", "b"]


def test_month_and_year_records_are_separate(cache):
    cache.store(Granularity.YEAR, "2026", "Year summary.", ["a"])

    assert cache.lookup(Granularity.MONTH, "2026-02") is None
    assert cache.lookup(Granularity.YEAR, "2026").content == "Year summary."


def test_owners_are_isolated(memory_store):
    InsightCache(memory_store, "alice").store(Granularity.MONTH, "2026-02", "Hers.", ["a"])
    assert InsightCache(memory_store, "bob").lookup(Granularity.MONTH, "2026-02") is None


def test_invalid_key_rejected_before_storage(cache):
    with pytest.raises(ValidationError):
        cache.lookup(Granularity.MONTH, "2026")
    with pytest.raises(ValidationError):
        cache.store(Granularity.YEAR, "2026-02", "x", [])


def test_unconfigured_cache_degrades():
    cache = InsightCache(None, "user-1")

    assert cache.configured is False
    assert cache.lookup(Granularity.MONTH, "2026-02") is None
    with pytest.raises(NotConfiguredError):
        cache.store(Granularity.MONTH, "2026-02", "x", ["a"])
