"""Prompt templates for timeframe insights and per-entry compliments."""

from __future__ import annotations

from collections.abc import Sequence

from acclog.journal.models import Entry, Granularity
from acclog.journal.timekeys import bucket_label

INSIGHT_PROMPT = """You are an insightful career coach analyzing someone's accomplishments for {timeframe_label}.

Accomplishments ({count} total):
{items}

Please provide a thoughtful, encouraging analysis in 3-4 paragraphs that:
1. Identifies patterns and themes across their accomplishments
2. Highlights their highest-impact work (ratings 8-10)
3. Notes areas of growth or consistent focus
4. Offers one actionable insight or suggestion for the next period

Keep the tone warm, professional, and motivating. Use markdown formatting for readability."""

COMPLIMENT_PROMPT = """User Accomplishment: "{text}"
User Rating: {rating}/10

Provide a very short, warm, and encouraging 1-sentence comment about this accomplishment. Sound like a supportive friend. Do not use exclamation marks excessively."""


def build_insight_prompt(
    entries: Sequence[Entry], timeframe_type: Granularity | str, timeframe_key: str
) -> str:
    """Render the insight prompt; entries are listed highest impact first."""
    ranked = sorted(entries, key=lambda e: e.rating, reverse=True)
    items = "\n".join(
        f"{i}. [Impact: {e.rating}/10] {e.text}" for i, e in enumerate(ranked, start=1)
    )
    return INSIGHT_PROMPT.format(
        timeframe_label=bucket_label(timeframe_key, timeframe_type),
        count=len(entries),
        items=items,
    )


def build_compliment_prompt(text: str, rating: int) -> str:
    return COMPLIMENT_PROMPT.format(text=text, rating=rating)
