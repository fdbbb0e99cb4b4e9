"""Insight endpoints: read the cached insight, or (re)generate it on request."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, Request

from acclog.api.middleware.owner import get_generator, get_owner_id, get_store
from acclog.errors import PreconditionError
from acclog.insights.cache import InsightCache
from acclog.insights.orchestrator import InsightOrchestrator
from acclog.insights.ports import InsightGenerator
from acclog.journal.aggregator import bucket_entries, entry_ids
from acclog.journal.models import Granularity
from acclog.journal.service import JournalService
from acclog.journal.timekeys import parse_bucket_key
from acclog.observability.logging import get_logger
from acclog.storage.ports import JournalStore

router = APIRouter(prefix="/api/insights", tags=["insights"])
logger = get_logger(__name__)


@router.get("/{granularity}/{key}")
async def get_insight(
    granularity: str,
    key: str,
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
) -> dict[str, Any]:
    """Cached insight for the bucket; a miss returns insight=null, not an error."""
    timeframe_type = Granularity.parse(granularity)
    cache = InsightCache(store, owner_id)
    insight = await asyncio.to_thread(cache.lookup, timeframe_type, key)
    if insight is None:
        return {"insight": None, "isStale": False}

    entries = await asyncio.to_thread(JournalService(store, owner_id).list_entries)
    current_ids = entry_ids(bucket_entries(entries, key, timeframe_type))
    return {"insight": insight.to_json_dict(), "isStale": cache.is_stale(insight, current_ids)}


@router.post("/{granularity}/{key}")
async def generate_insight(
    granularity: str,
    key: str,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
    generator: InsightGenerator | None = Depends(get_generator),
) -> dict[str, Any]:
    """Generate or regenerate the insight for one bucket.

    Duplicate requests for the same (owner, bucket) while one is running are
    refused with 409 so two writes never race on the same record.
    """
    timeframe_type = Granularity.parse(granularity)
    parse_bucket_key(key, timeframe_type)

    in_flight: set[tuple[str, str, str]] = request.app.state.insights_in_flight
    token = (owner_id, timeframe_type.value, key)
    if token in in_flight:
        raise PreconditionError("Insight generation already in progress")
    in_flight.add(token)

    try:
        entries = await asyncio.to_thread(JournalService(store, owner_id).list_entries)
        orchestrator = InsightOrchestrator(InsightCache(store, owner_id), generator)
        await orchestrator.select(
            timeframe_type, key, bucket_entries(entries, key, timeframe_type)
        )
        insight = await orchestrator.generate()
    finally:
        in_flight.discard(token)

    logger.info("Generated insight %s for owner %s", insight.id, owner_id)
    return {"insight": insight.to_json_dict(), "isStale": False}
