"""Timeframe endpoints: bucket listing and a single bucket with its cached insight."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from acclog.api.middleware.owner import get_owner_id, get_store
from acclog.api.routes.entries import EntryResponse, _to_response
from acclog.insights.cache import InsightCache
from acclog.journal.aggregator import entry_ids
from acclog.journal.models import Granularity, utc_now
from acclog.journal.service import JournalService
from acclog.journal.timekeys import format_relative_time
from acclog.storage.ports import JournalStore

router = APIRouter(prefix="/api/timeframes", tags=["timeframes"])


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatsResponse(_CamelModel):
    count: int
    average_rating: float


class TimeframeItem(_CamelModel):
    key: str
    label: str
    stats: StatsResponse


class TimeframeListResponse(_CamelModel):
    timeframe_type: Granularity
    timeframes: list[TimeframeItem]


class BucketResponse(_CamelModel):
    timeframe_type: Granularity
    timeframe_key: str
    label: str
    entries: list[EntryResponse]
    stats: StatsResponse
    previous_key: str | None = None
    next_key: str | None = None
    insight: dict[str, Any] | None = None
    insight_generated: str | None = None
    is_stale: bool = False


@router.get("/{granularity}", response_model=TimeframeListResponse)
async def list_timeframes(
    granularity: str,
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
) -> TimeframeListResponse:
    timeframe_type = Granularity.parse(granularity)
    summaries = await asyncio.to_thread(JournalService(store, owner_id).timeframes, timeframe_type)
    return TimeframeListResponse(
        timeframe_type=timeframe_type,
        timeframes=[
            TimeframeItem(
                key=s.key,
                label=s.label,
                stats=StatsResponse(
                    count=s.stats.count, average_rating=round(s.stats.average_rating, 2)
                ),
            )
            for s in summaries
        ],
    )


@router.get("/{granularity}/{key}", response_model=BucketResponse)
async def get_bucket(
    granularity: str,
    key: str,
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
) -> BucketResponse:
    """One bucket with its cached insight and staleness.

    Reading never regenerates; a stale insight is reported as such.
    """
    timeframe_type = Granularity.parse(granularity)
    view = await asyncio.to_thread(JournalService(store, owner_id).bucket, timeframe_type, key)
    insight = await asyncio.to_thread(InsightCache(store, owner_id).lookup, timeframe_type, key)

    generated = format_relative_time(insight.generated_at, utc_now()) if insight else None
    stale = InsightCache.is_stale(insight, entry_ids(view.entries)) if insight else False

    return BucketResponse(
        timeframe_type=timeframe_type,
        timeframe_key=key,
        label=view.label,
        entries=[_to_response(e) for e in view.entries],
        stats=StatsResponse(
            count=view.stats.count, average_rating=round(view.stats.average_rating, 2)
        ),
        previous_key=view.previous_key,
        next_key=view.next_key,
        insight=insight.to_json_dict() if insight else None,
        insight_generated=generated,
        is_stale=stale,
    )
