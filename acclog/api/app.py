"""FastAPI server for the accomplishment journal"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from acclog.api.routes.entries import router as entries_router
from acclog.api.routes.health import router as health_router
from acclog.api.routes.insights import router as insights_router
from acclog.api.routes.timeframes import router as timeframes_router
from acclog.config import APP_VERSION
from acclog.errors import (
    JournalError,
    NavigationError,
    NotConfiguredError,
    PermanentGenerationError,
    PreconditionError,
    TransientGenerationError,
    ValidationError,
)
from acclog.infrastructure.settings import DB_PATH, is_development, llm_configured
from acclog.insights.ports import InsightGenerator
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter, log_event
from acclog.storage.ports import JournalStore

logger = get_logger(__name__)

# Most specific first: the first isinstance match wins
_ERROR_STATUS: list[tuple[type[JournalError], int, str | None]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST, None),
    (NavigationError, status.HTTP_404_NOT_FOUND, None),
    (PreconditionError, status.HTTP_409_CONFLICT, None),
    (NotConfiguredError, status.HTTP_503_SERVICE_UNAVAILABLE, "Service not configured"),
    (
        TransientGenerationError,
        status.HTTP_429_TOO_MANY_REQUESTS,
        "AI service is busy. Please try again later.",
    ),
    (PermanentGenerationError, status.HTTP_502_BAD_GATEWAY, "Failed to generate insight"),
]


def _status_for(exc: JournalError) -> tuple[int, str]:
    for exc_type, code, public_message in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code, public_message or str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"


def _default_store() -> JournalStore:
    from acclog.storage.sqlite_store import SQLiteJournalStore

    return SQLiteJournalStore(DB_PATH)


def _default_generator() -> InsightGenerator | None:
    if not llm_configured():
        logger.warning("GOOGLE_API_KEY / GOOGLE_CLOUD_PROJECT not set - insights disabled")
        return None
    from acclog.llm.insight_generator import GeminiInsightGenerator

    return GeminiInsightGenerator()


def create_app(
    store: JournalStore | None = None,
    generator: InsightGenerator | None = None,
    use_defaults: bool = True,
) -> FastAPI:
    """
    Build the API with explicitly injected collaborators.

    When use_defaults is true, missing collaborators are created from
    settings (SQLite at ACCLOG_DB_PATH, Gemini when credentials exist) and
    owned by the app: they are closed on shutdown. Pass use_defaults=False to
    run with exactly what was given, e.g. no store at all.
    """
    load_dotenv()

    owns_store = False
    if store is None and use_defaults:
        store = _default_store()
        owns_store = True
    if generator is None and use_defaults:
        generator = _default_generator()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log_event("api.startup", service="acclog", version=APP_VERSION)
        yield
        if owns_store and hasattr(store, "close"):
            store.close()
            logger.info("Closed journal store")

    app = FastAPI(title="Accomplishment Journal API", version=APP_VERSION, lifespan=lifespan)
    app.state.store = store
    app.state.generator = generator
    app.state.insights_in_flight = set()

    @app.exception_handler(JournalError)
    async def journal_error_handler(request: Request, exc: JournalError) -> JSONResponse:
        code, message = _status_for(exc)
        counter(f"api.errors.{type(exc).__name__}")
        if code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        else:
            logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        return JSONResponse(status_code=code, content={"error": message})

    # Custom validation error handler to prevent information leakage
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        counter("api.validation_errors")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Invalid request format. Please check your request and try again.",
                "error_count": len(exc.errors()),
                "invalid_fields": [str(err["loc"][-1]) for err in exc.errors()],
            },
        )

    allowed_origins = ["http://localhost:3000", "http://127.0.0.1:3000"] if is_development() else []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-User-Id"],
    )

    app.include_router(health_router)
    app.include_router(entries_router)
    app.include_router(timeframes_router)
    app.include_router(insights_router)

    @app.get("/")
    def root() -> dict[str, Any]:
        return {
            "service": "Accomplishment Journal API",
            "version": APP_VERSION,
            "status": "running",
            "endpoints": {
                "health": "/health",
                "entries": "/api/entries",
                "timeframes": "/api/timeframes/{granularity}",
                "bucket": "/api/timeframes/{granularity}/{key}",
                "insights": "/api/insights/{granularity}/{key}",
            },
        }

    return app
