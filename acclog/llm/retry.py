"""Gemini call with bounded retry.

Transient Google API failures are converted to builtin exceptions
(TimeoutError, ConnectionError, OSError) and retried with exponential
backoff, LLM_MAX_RETRIES attempts in total. Anything else (bad key, invalid
request, safety block) propagates unchanged on the first attempt for the
caller to classify.
"""

from __future__ import annotations

from google.api_core import exceptions as google_exceptions
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from acclog.config import LLM_MAX_RETRIES, LLM_TIMEOUT_SECONDS
from acclog.infrastructure.settings import GEMINI_MAX_TOKENS, GEMINI_TEMPERATURE
from acclog.llm.gemini import get_gemini_model
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter

logger = get_logger(__name__)

# google exception -> (builtin raised instead, counter suffix)
_TRANSIENT: dict[type[Exception], tuple[type[Exception], str]] = {
    google_exceptions.DeadlineExceeded: (TimeoutError, "timeout"),
    google_exceptions.ServiceUnavailable: (ConnectionError, "service_unavailable"),
    google_exceptions.InternalServerError: (ConnectionError, "internal_error"),
    google_exceptions.ResourceExhausted: (OSError, "rate_limited"),
}


def _convert_transient(exc: Exception, counter_prefix: str) -> Exception:
    for google_type, (builtin, name) in _TRANSIENT.items():
        if isinstance(exc, google_type):
            counter(f"{counter_prefix}.{name}")
            if builtin is TimeoutError:
                return TimeoutError(f"Gemini call exceeded {LLM_TIMEOUT_SECONDS}s: {exc}")
            return builtin(f"Gemini {name.replace('_', ' ')}: {exc}")
    return exc


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "Gemini call failed (attempt %d/%d), retrying: %s",
        state.attempt_number,
        LLM_MAX_RETRIES,
        exc,
    )


@retry(
    stop=stop_after_attempt(LLM_MAX_RETRIES),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((TimeoutError, ConnectionError, OSError)),
    before_sleep=_log_retry,
    reraise=True,
)
def call_llm(
    prompt: str,
    counter_prefix: str = "llm",
    max_output_tokens: int | None = None,
    temperature: float | None = None,
) -> str:
    """Send one prompt to Gemini and return the response text.

    Args:
        prompt: Full prompt text.
        counter_prefix: Telemetry prefix ("insights", "compliment").
        max_output_tokens: Override GEMINI_MAX_TOKENS for short answers.
        temperature: Override GEMINI_TEMPERATURE.

    Raises:
        TimeoutError / ConnectionError / OSError: Transient failure that
            outlived the retries.
        GeminiInitializationError: No credentials or SDK.
        Exception: Any other Google API error, unchanged.
    """
    model = get_gemini_model()
    generation_config = {
        "temperature": GEMINI_TEMPERATURE if temperature is None else temperature,
        "max_output_tokens": max_output_tokens or GEMINI_MAX_TOKENS,
    }

    counter(f"{counter_prefix}.calls")
    try:
        response = model.generate_content(prompt, generation_config=generation_config)
    except tuple(_TRANSIENT) as e:
        raise _convert_transient(e, counter_prefix) from e
    return response.text
