"""Unit tests for the Gemini insight generator's error classification"""

from __future__ import annotations

import pytest
from google.api_core import exceptions as google_exceptions

from acclog.errors import NotConfiguredError, PermanentGenerationError, TransientGenerationError
from acclog.journal.models import Granularity
from acclog.llm.insight_generator import GeminiInsightGenerator


@pytest.fixture
def entries(make_entry):
    return [make_entry("2026-02-10T09:00:00+00:00", rating=8, text="Shipped the importer")]


def _patch_llm(monkeypatch, result=None, error=None):
    prompts = []

    def fake_call_llm(prompt, counter_prefix="llm", **options):
        prompts.append((prompt, counter_prefix))
        if error is not None:
            raise error
        return result

    monkeypatch.setattr("acclog.llm.insight_generator.call_llm", fake_call_llm)
    return prompts


def test_summarize_returns_stripped_text(monkeypatch, entries):
    prompts = _patch_llm(monkeypatch, result="  A strong month.\n")

    text = GeminiInsightGenerator().summarize(entries, Granularity.MONTH, "2026-02")

    assert text == "A strong month."
    prompt, prefix = prompts[0]
    assert "February 2026" in prompt
    assert "[Impact: 8/10] Shipped the importer" in prompt
    assert prefix == "insights"


@pytest.mark.parametrize(
    "error",
    [
        TimeoutError("deadline"),
        ConnectionError("unavailable"),
        OSError("rate limited"),
        RuntimeError("Quota exceeded for project"),
        RuntimeError("429 Too Many Requests"),
        RuntimeError("Rate limit reached for model"),
    ],
)
def test_transient_failures(monkeypatch, entries, error):
    _patch_llm(monkeypatch, error=error)
    with pytest.raises(TransientGenerationError):
        GeminiInsightGenerator().summarize(entries, Granularity.MONTH, "2026-02")


@pytest.mark.parametrize(
    "error",
    [
        google_exceptions.PermissionDenied("API key not valid"),
        google_exceptions.InvalidArgument("bad request"),
        RuntimeError("something unexpected"),
        ValueError(
            "Invalid operation: The `response.text` quick accessor requires the response to "
            "contain a valid `Part`, but none were returned. Check the `candidate.safety_ratings` "
            "(https://ai.google.dev/api/generate-content#finishreason)"
        ),
        ValueError("Billing must be enabled to generate content"),
    ],
)
def test_permanent_failures(monkeypatch, entries, error):
    _patch_llm(monkeypatch, error=error)
    with pytest.raises(PermanentGenerationError):
        GeminiInsightGenerator().summarize(entries, Granularity.MONTH, "2026-02")


def test_empty_response_is_transient(monkeypatch, entries):
    _patch_llm(monkeypatch, result="   ")
    with pytest.raises(TransientGenerationError):
        GeminiInsightGenerator().summarize(entries, Granularity.MONTH, "2026-02")


def test_missing_credentials_propagate(monkeypatch, entries):
    _patch_llm(monkeypatch, error=NotConfiguredError("Gemini not configured"))
    with pytest.raises(NotConfiguredError):
        GeminiInsightGenerator().summarize(entries, Granularity.MONTH, "2026-02")


def test_compliment(monkeypatch):
    prompts = _patch_llm(monkeypatch, result="That is a real milestone.")
    assert GeminiInsightGenerator().compliment("Ran 10k", 7) == "That is a real milestone."
    assert prompts[0][1] == "compliment"


def test_compliment_failure_is_silent(monkeypatch):
    _patch_llm(monkeypatch, error=ConnectionError("down"))
    assert GeminiInsightGenerator().compliment("Ran 10k", 7) == ""
