"""
SQLite-backed journal store.

Every query is scoped by owner_id. Insights are upserted on
(owner_id, id) where id is the composite "{timeframeType}_{timeframeKey}",
so regenerating a summary overwrites the previous record in one statement.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from acclog.infrastructure.database import DatabaseConnectionPool, init_database, retry_on_db_lock
from acclog.journal.models import Entry, EntryCreate, Granularity, Insight, insight_id
from acclog.observability.logging import get_logger

logger = get_logger(__name__)


def _entry_from_row(row: sqlite3.Row) -> Entry:
    return Entry(
        id=row["id"],
        text=row["text"],
        rating=row["rating"],
        timestamp=datetime.fromisoformat(row["timestamp"]),
    )


def _insight_from_row(row: sqlite3.Row) -> Insight:
    ids = json.loads(row["accomplishment_ids"]) if row["accomplishment_ids"] else []
    return Insight(
        id=row["id"],
        timeframe_type=Granularity(row["timeframe_type"]),
        timeframe_key=row["timeframe_key"],
        content=row["content"],
        generated_at=datetime.fromisoformat(row["generated_at"]),
        accomplishment_count=row["accomplishment_count"],
        accomplishment_ids=ids,
    )


class SQLiteJournalStore:
    """
    JournalStore over a single SQLite file.

    Construct once at process start and call close() at shutdown.
    """

    def __init__(self, db_path: Path | str, pool_size: int | None = None) -> None:
        self.db_path = Path(db_path)
        init_database(self.db_path)
        if pool_size is None:
            self._pool = DatabaseConnectionPool(self.db_path)
        else:
            self._pool = DatabaseConnectionPool(self.db_path, pool_size=pool_size)

    def close(self) -> None:
        self._pool.close_all()

    def list_entries(self, owner_id: str) -> list[Entry]:
        with self._pool.connection() as conn:
            rows = conn.execute(
                "SELECT * FROM entries WHERE owner_id = ? ORDER BY timestamp DESC",
                (owner_id,),
            ).fetchall()
        entries = [_entry_from_row(row) for row in rows]
        # ISO strings with mixed offsets do not sort chronologically in SQL
        return sorted(entries, key=lambda e: e.timestamp, reverse=True)

    @retry_on_db_lock()
    def add_entry(self, owner_id: str, entry: EntryCreate) -> Entry:
        """
        Insert a new entry with a generated id.

        Side Effects:
            - Inserts row into entries table
            - Commits transaction
        """
        created = entry.to_entry(str(uuid.uuid4()))
        with self._pool.transaction() as conn:
            conn.execute(
                """
                INSERT INTO entries (id, owner_id, text, rating, timestamp)
                VALUES (:id, :owner_id, :text, :rating, :timestamp)
                """,
                {
                    "id": created.id,
                    "owner_id": owner_id,
                    "text": created.text,
                    "rating": created.rating,
                    "timestamp": created.timestamp.isoformat(),
                },
            )
        logger.info("Created entry %s for owner %s", created.id, owner_id)
        return created

    def get_insight(
        self, owner_id: str, timeframe_type: Granularity, timeframe_key: str
    ) -> Insight | None:
        with self._pool.connection() as conn:
            row = conn.execute(
                "SELECT * FROM insights WHERE owner_id = ? AND id = ?",
                (owner_id, insight_id(timeframe_type, timeframe_key)),
            ).fetchone()
        if not row:
            return None
        return _insight_from_row(row)

    @retry_on_db_lock()
    def put_insight(
        self,
        owner_id: str,
        timeframe_type: Granularity,
        timeframe_key: str,
        content: str,
        entry_ids: Iterable[str],
        generated_at: datetime,
    ) -> Insight:
        """
        Upsert the insight for (owner, type, key).

        Side Effects:
            - Inserts or replaces one row in insights table
            - Commits transaction
        """
        ids = sorted(set(entry_ids))
        insight = Insight(
            id=insight_id(timeframe_type, timeframe_key),
            timeframe_type=timeframe_type,
            timeframe_key=timeframe_key,
            content=content,
            generated_at=generated_at,
            accomplishment_count=len(ids),
            accomplishment_ids=ids,
        )
        params: dict[str, Any] = {
            "owner_id": owner_id,
            "id": insight.id,
            "timeframe_type": insight.timeframe_type.value,
            "timeframe_key": insight.timeframe_key,
            "content": insight.content,
            "generated_at": insight.generated_at.isoformat(),
            "accomplishment_count": insight.accomplishment_count,
            "accomplishment_ids": json.dumps(ids),
        }
        with self._pool.transaction() as conn:
            conn.execute(
                """
                INSERT INTO insights (
                    owner_id, id, timeframe_type, timeframe_key, content,
                    generated_at, accomplishment_count, accomplishment_ids
                ) VALUES (
                    :owner_id, :id, :timeframe_type, :timeframe_key, :content,
                    :generated_at, :accomplishment_count, :accomplishment_ids
                )
                ON CONFLICT (owner_id, id) DO UPDATE SET
                    content = excluded.content,
                    generated_at = excluded.generated_at,
                    accomplishment_count = excluded.accomplishment_count,
                    accomplishment_ids = excluded.accomplishment_ids
                """,
                params,
            )
        logger.info("Saved insight %s for owner %s (%d entries)", insight.id, owner_id, len(ids))
        return insight
