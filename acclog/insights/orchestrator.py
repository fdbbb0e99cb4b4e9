"""
Insight orchestration for one bucket view.

State machine: IDLE -> LOADING -> {READY, FAILED}; READY and FAILED go back
to LOADING on an explicit select() or generate(). Staleness is only reported,
never acted on: regeneration is always a deliberate caller action.

Blocking collaborators (storage, Gemini) run in worker threads so the event
loop stays responsive. Every request is tagged with the view it was issued
for; a result that arrives after the view moved on is persisted but not
surfaced.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from enum import Enum

from acclog.config import INSIGHT_MAX_ENTRIES
from acclog.errors import NotConfiguredError, PreconditionError
from acclog.insights.cache import InsightCache
from acclog.insights.ports import InsightGenerator
from acclog.journal.aggregator import entry_ids
from acclog.journal.models import Entry, Granularity, Insight
from acclog.journal.navigator import BucketNavigator
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter, log_event

logger = get_logger(__name__)

ViewKey = tuple[Granularity, str]


class InsightState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class InsightOrchestrator:
    """Coordinates cache lookup, regeneration and persistence for the selected bucket."""

    def __init__(
        self,
        cache: InsightCache,
        generator: InsightGenerator | None,
        max_entries: int = INSIGHT_MAX_ENTRIES,
    ) -> None:
        self.cache = cache
        self.generator = generator
        self.max_entries = max_entries

        self.state = InsightState.IDLE
        self.insight: Insight | None = None
        self.error: Exception | None = None

        self._view: ViewKey | None = None
        self._entries: list[Entry] = []
        # Bumped on every select(); lookups tagged with an older version are discarded
        self._version = 0
        self._in_flight: set[ViewKey] = set()

    @property
    def view(self) -> ViewKey | None:
        return self._view

    @property
    def entries(self) -> list[Entry]:
        return list(self._entries)

    @property
    def is_generating(self) -> bool:
        return self._view is not None and self._view in self._in_flight

    @property
    def is_stale(self) -> bool:
        if self.insight is None:
            return False
        return self.cache.is_stale(self.insight, entry_ids(self._entries))

    # Events

    async def select(
        self, granularity: Granularity | str, key: str | None, entries: Iterable[Entry]
    ) -> Insight | None:
        """
        Switch to a bucket and load its cached insight.

        A cache miss ends in READY with no insight. Storage errors end in
        FAILED and are re-raised.
        """
        granularity = Granularity.parse(granularity)
        self._version += 1
        version = self._version
        self._entries = list(entries)
        self.insight = None
        self.error = None

        if key is None:
            self._view = None
            self.state = InsightState.IDLE
            return None

        self._view = (granularity, key)
        self.state = InsightState.LOADING

        try:
            insight = await asyncio.to_thread(self.cache.lookup, granularity, key)
        except Exception as e:
            if version == self._version:
                self.state = InsightState.FAILED
                self.error = e
            counter("insights.lookup.failed")
            logger.error("Insight lookup failed for %s %s: %s", granularity.value, key, e)
            raise

        if version != self._version:
            counter("insights.lookup.discarded")
            return insight

        self.insight = insight
        self.state = InsightState.READY
        return insight

    def update_entries(self, entries: Iterable[Entry]) -> None:
        """Entries changed within the current bucket; staleness is re-derived lazily."""
        self._entries = list(entries)

    async def follow(self, navigator: BucketNavigator) -> Insight | None:
        """Mirror the navigator's selection, reloading only when the bucket changed."""
        key = navigator.selected_key
        target = (navigator.granularity, key) if key is not None else None
        if target is not None and target == self._view:
            self.update_entries(navigator.current_entries)
            return self.insight
        return await self.select(navigator.granularity, key, navigator.current_entries)

    async def generate(self) -> Insight:
        """
        Generate (or regenerate) the insight for the current bucket.

        The generator sees at most max_entries entries in supplied order; the
        stored record tracks the ids of the full bucket.

        Raises:
            PreconditionError: No bucket selected, empty bucket, or a
                generation for this bucket is already in flight
            NotConfiguredError: No generator configured
            GenerationError: Collaborator failure (state becomes FAILED)
        """
        if self._view is None or not self._entries:
            counter("insights.generate.refused_empty")
            raise PreconditionError("Cannot generate insight for empty accomplishments")

        view = self._view
        if view in self._in_flight:
            counter("insights.generate.refused_in_flight")
            raise PreconditionError("Insight generation already in progress")

        granularity, key = view
        entries = list(self._entries)
        tracked_ids = entry_ids(entries)
        prompt_entries = entries[: self.max_entries]

        self._in_flight.add(view)
        self.state = InsightState.LOADING
        self.error = None
        log_event(
            "insights.generate.start",
            timeframe_type=granularity.value,
            timeframe_key=key,
            entry_count=len(entries),
            prompt_count=len(prompt_entries),
        )

        try:
            if self.generator is None:
                raise NotConfiguredError("AI service not configured")
            content = await asyncio.to_thread(
                self.generator.summarize, prompt_entries, granularity, key
            )
            insight = await asyncio.to_thread(
                self.cache.store, granularity, key, content, tracked_ids
            )
        except Exception as e:
            if self._view == view:
                self.state = InsightState.FAILED
                self.error = e
            counter("insights.generate.failed")
            logger.warning("Insight generation failed for %s %s: %s", granularity.value, key, e)
            raise
        finally:
            self._in_flight.discard(view)

        counter("insights.generate.success")
        if self._view != view:
            counter("insights.generate.discarded")
            logger.info(
                "Discarding insight for %s %s: view moved on", granularity.value, key
            )
            return insight

        self.insight = insight
        self.state = InsightState.READY
        return insight
