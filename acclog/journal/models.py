"""
Journal domain models.

Entries are immutable once created. Insights are cached AI summaries for one
timeframe bucket, keyed by a composite "{timeframeType}_{timeframeKey}" id so
that re-saving overwrites instead of duplicating.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from acclog.config import RATING_MAX, RATING_MIN
from acclog.errors import ValidationError


def utc_now() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def _ensure_aware(value: datetime) -> datetime:
    # Naive datetimes are taken as UTC so entries stay mutually comparable
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Granularity(str, Enum):
    """Bucketing width for timeframes."""

    MONTH = "month"
    YEAR = "year"

    @classmethod
    def parse(cls, value: str | Granularity) -> Granularity:
        try:
            return cls(value)
        except ValueError as e:
            raise ValidationError(
                f"Invalid timeframe type {value!r}. Must be 'month' or 'year'"
            ) from e


def insight_id(timeframe_type: Granularity | str, timeframe_key: str) -> str:
    """Composite identifier used as the upsert key for insight records."""
    return f"{Granularity.parse(timeframe_type).value}_{timeframe_key}"


class Entry(BaseModel):
    """A single logged accomplishment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque unique identifier assigned at creation")
    text: str
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX, strict=True)
    timestamp: datetime

    @field_validator("text")
    @classmethod
    def text_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("text cannot be empty")
        return v.strip()

    @field_validator("timestamp")
    @classmethod
    def timestamp_aware(cls, v: datetime) -> datetime:
        return _ensure_aware(v)


class EntryCreate(BaseModel):
    """Input model for logging a new accomplishment (no id yet)."""

    text: str
    rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX, strict=True)
    timestamp: datetime | None = None

    @field_validator("text")
    @classmethod
    def text_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Text is required")
        return v.strip()

    @field_validator("timestamp")
    @classmethod
    def timestamp_aware(cls, v: datetime | None) -> datetime | None:
        return _ensure_aware(v) if v is not None else None

    @classmethod
    def build(cls, text: Any, rating: Any, timestamp: Any = None) -> EntryCreate:
        """Validate raw input, raising the journal ValidationError on bad data."""
        try:
            return cls(text=text, rating=rating, timestamp=timestamp)
        except PydanticValidationError as e:
            fields = ", ".join(str(err["loc"][-1]) for err in e.errors())
            if "rating" in fields:
                msg = f"Rating must be a number between {RATING_MIN} and {RATING_MAX}"
            else:
                msg = f"Invalid entry fields: {fields}"
            raise ValidationError(msg) from e

    def to_entry(self, entry_id: str) -> Entry:
        return Entry(
            id=entry_id,
            text=self.text,
            rating=self.rating,
            timestamp=self.timestamp or utc_now(),
        )


class Insight(BaseModel):
    """
    Cached AI-generated summary for one (timeframeType, timeframeKey) bucket.

    accomplishment_ids records exactly which entries the summary was computed
    from; staleness compares it against the live bucket.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    timeframe_type: Granularity
    timeframe_key: str
    content: str
    generated_at: datetime
    accomplishment_count: int
    accomplishment_ids: list[str] = Field(default_factory=list)

    @property
    def entry_id_set(self) -> frozenset[str]:
        return frozenset(self.accomplishment_ids)

    def to_json_dict(self) -> dict[str, Any]:
        """Wire shape with the camelCase field names every layer must preserve."""
        return self.model_dump(mode="json", by_alias=True)
