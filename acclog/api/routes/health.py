"""Health check endpoint."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request

from acclog.config import APP_VERSION
from acclog.observability.telemetry import counters, get_latency_stats

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Service status, collaborator wiring and in-process insight counters.

    Does not call Gemini; only reports whether a generator is configured.
    """
    return {
        "status": "healthy",
        "service": "acclog",
        "version": APP_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "storage": {"configured": request.app.state.store is not None},
        "llm": {
            "configured": request.app.state.generator is not None,
            "latency_ms": get_latency_stats("insights.llm_latency"),
        },
        "insights": counters("insights.generate."),
    }
