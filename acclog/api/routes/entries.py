"""Entry endpoints: log a new accomplishment, list all of an owner's entries."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from acclog.api.middleware.owner import get_generator, get_owner_id, get_store
from acclog.insights.ports import InsightGenerator
from acclog.journal.models import Entry
from acclog.journal.service import JournalService
from acclog.observability.logging import get_logger
from acclog.storage.ports import JournalStore

router = APIRouter(prefix="/api/entries", tags=["entries"])
logger = get_logger(__name__)


class EntryRequest(BaseModel):
    """Raw entry input; validated by the journal service, not by FastAPI."""

    text: Any = None
    rating: Any = None
    timestamp: Any = None


class EntryResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    rating: int
    timestamp: datetime
    ai_insight: str | None = None


class EntryListResponse(BaseModel):
    entries: list[EntryResponse]
    count: int


def _to_response(entry: Entry, ai_insight: str | None = None) -> EntryResponse:
    return EntryResponse(
        id=entry.id,
        text=entry.text,
        rating=entry.rating,
        timestamp=entry.timestamp,
        ai_insight=ai_insight or None,
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=EntryResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def create_entry(
    body: EntryRequest,
    compliment: bool = Query(False, description="Ask the AI for a one-line encouragement"),
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
    generator: InsightGenerator | None = Depends(get_generator),
) -> EntryResponse:
    service = JournalService(store, owner_id)
    entry = await asyncio.to_thread(service.add_entry, body.text, body.rating, body.timestamp)

    ai_insight = None
    if compliment and generator is not None and hasattr(generator, "compliment"):
        ai_insight = await asyncio.to_thread(generator.compliment, entry.text, entry.rating)

    return _to_response(entry, ai_insight)


@router.get("", response_model=EntryListResponse, response_model_by_alias=True)
async def list_entries(
    owner_id: str = Depends(get_owner_id),
    store: JournalStore | None = Depends(get_store),
) -> EntryListResponse:
    entries = await asyncio.to_thread(JournalService(store, owner_id).list_entries)
    return EntryListResponse(entries=[_to_response(e) for e in entries], count=len(entries))
