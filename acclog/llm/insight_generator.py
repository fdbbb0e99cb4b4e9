"""
Gemini-backed insight generator.

Wraps call_llm and classifies failures into the journal error taxonomy:
transient failures (rate limits, timeouts, outages that outlived the
retries) versus permanent ones (bad credentials, rejected requests).
"""

from __future__ import annotations

from collections.abc import Sequence

from google.api_core import exceptions as google_exceptions

from acclog.config import COMPLIMENT_MAX_TOKENS
from acclog.errors import NotConfiguredError, PermanentGenerationError, TransientGenerationError
from acclog.insights.prompts import build_compliment_prompt, build_insight_prompt
from acclog.journal.models import Entry, Granularity
from acclog.llm.retry import call_llm
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter, time_block

logger = get_logger(__name__)

# Phrases that mark a rate limit in an otherwise unclassified error message
_RATE_LIMIT_PHRASES = ("quota", "rate limit", "rate-limit", "too many requests", "429")

_PERMANENT_ERRORS = (
    google_exceptions.PermissionDenied,
    google_exceptions.Unauthenticated,
    google_exceptions.InvalidArgument,
    google_exceptions.NotFound,
)


class GeminiInsightGenerator:
    """InsightGenerator implementation calling Gemini."""

    def summarize(
        self, entries: Sequence[Entry], timeframe_type: Granularity, timeframe_key: str
    ) -> str:
        prompt = build_insight_prompt(entries, timeframe_type, timeframe_key)

        try:
            with time_block("insights.llm_latency"):
                text = call_llm(prompt, counter_prefix="insights")
        except NotConfiguredError:
            counter("insights.llm.not_configured")
            raise
        except (TimeoutError, ConnectionError, OSError) as e:
            counter("insights.llm.transient_failure")
            raise TransientGenerationError(
                "AI service is busy or unreachable. Please try again later."
            ) from e
        except _PERMANENT_ERRORS as e:
            counter("insights.llm.permanent_failure")
            logger.error("Insight generation rejected by Gemini: %s", e)
            raise PermanentGenerationError("AI service rejected the request") from e
        except Exception as e:
            message = str(e).lower()
            if any(phrase in message for phrase in _RATE_LIMIT_PHRASES):
                counter("insights.llm.transient_failure")
                raise TransientGenerationError("API quota exceeded. Please try again later.") from e
            counter("insights.llm.permanent_failure")
            logger.error("Insight generation failed: %s", e)
            raise PermanentGenerationError(f"Failed to generate insight: {e}") from e

        text = (text or "").strip()
        if not text:
            counter("insights.llm.empty_response")
            raise TransientGenerationError("AI service returned an empty response")

        counter("insights.llm.success")
        return text

    def compliment(self, text: str, rating: int) -> str:
        """One-sentence encouragement for a new entry. Best-effort: "" on failure."""
        prompt = build_compliment_prompt(text, rating)
        try:
            reply = call_llm(
                prompt, counter_prefix="compliment", max_output_tokens=COMPLIMENT_MAX_TOKENS
            )
            return (reply or "").strip()
        except Exception as e:
            counter("compliment.failed")
            logger.warning("Compliment generation failed: %s", e)
            return ""
