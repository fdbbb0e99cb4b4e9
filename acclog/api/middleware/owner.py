"""Owner identity and collaborator dependencies for journal routes."""

from __future__ import annotations

from fastapi import Header, HTTPException, Request, status

from acclog.insights.ports import InsightGenerator
from acclog.storage.ports import JournalStore

OWNER_HEADER = "X-User-Id"


def get_owner_id(x_user_id: str | None = Header(None)) -> str:
    """
    Resolve the owner for this request from the X-User-Id header.

    Identity is established upstream (auth proxy or client SDK); the journal
    core only needs a stable opaque owner id.
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {OWNER_HEADER} header",
        )
    return x_user_id.strip()


def get_store(request: Request) -> JournalStore | None:
    return request.app.state.store


def get_generator(request: Request) -> InsightGenerator | None:
    return request.app.state.generator
