"""SQLite plumbing for the journal store.

- `SCHEMA` / `init_database()`: idempotent table setup
- `retry_on_db_lock()`: tenacity policy for "database is locked" / busy
- `DatabaseConnectionPool`: bounded, lazily filled pool of WAL connections

Pools belong to the store that created them; there is no module-level
connection state.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from queue import Empty, Full, LifoQueue
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from acclog.config import (
    DB_CONNECT_TIMEOUT,
    DB_POOL_SIZE,
    DB_POOL_TIMEOUT,
    DB_RETRY_BASE_DELAY,
    DB_RETRY_JITTER,
    DB_RETRY_MAX,
    DB_RETRY_MAX_DELAY,
)
from acclog.observability.logging import get_logger
from acclog.observability.telemetry import counter

F = TypeVar("F", bound=Callable[..., Any])

logger = get_logger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS entries (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        text TEXT NOT NULL,
        rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 10),
        timestamp TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE INDEX IF NOT EXISTS idx_entries_owner_ts
        ON entries (owner_id, timestamp DESC);

    CREATE TABLE IF NOT EXISTS insights (
        owner_id TEXT NOT NULL,
        id TEXT NOT NULL,
        timeframe_type TEXT NOT NULL CHECK (timeframe_type IN ('month', 'year')),
        timeframe_key TEXT NOT NULL,
        content TEXT NOT NULL,
        generated_at TEXT NOT NULL,
        accomplishment_count INTEGER NOT NULL,
        accomplishment_ids TEXT NOT NULL,
        PRIMARY KEY (owner_id, id)
    );
"""


def _is_lock_error(exc: BaseException) -> bool:
    if not isinstance(exc, sqlite3.OperationalError):
        return False
    message = str(exc).lower()
    return "locked" in message or "busy" in message


def _log_lock_retry(state: RetryCallState) -> None:
    counter("database.lock_retry")
    logger.warning(
        "Database locked in %s (attempt %d), retrying in %.2fs",
        getattr(state.fn, "__name__", "?"),
        state.attempt_number,
        state.next_action.sleep if state.next_action else 0.0,
    )


def retry_on_db_lock(
    max_retries: int = DB_RETRY_MAX,
    base_delay: float = DB_RETRY_BASE_DELAY,
    max_delay: float = DB_RETRY_MAX_DELAY,
) -> Callable[[F], F]:
    """
    Retry a write when SQLite reports the database locked or busy.

    Other OperationalErrors (missing table, syntax) propagate on the first
    attempt. After max_retries retries the last lock error is re-raised.

    Usage:
        @retry_on_db_lock()
        def put_insight(...):
            with self._pool.transaction() as conn:
                conn.execute("INSERT INTO ...")
    """
    return retry(
        retry=retry_if_exception(_is_lock_error),
        stop=stop_after_attempt(max_retries + 1),
        wait=wait_exponential_jitter(
            initial=base_delay, max=max_delay, jitter=base_delay * DB_RETRY_JITTER
        ),
        before_sleep=_log_lock_retry,
        reraise=True,
    )


class DatabaseConnectionPool:
    """
    Bounded SQLite connection pool.

    Connections are opened on demand up to pool_size and then reused; when
    all are checked out, callers wait up to DB_POOL_TIMEOUT seconds.
    Connections are shared across worker threads (check_same_thread=False)
    but only ever used by one thread at a time.
    """

    def __init__(self, db_path: Path, pool_size: int = DB_POOL_SIZE) -> None:
        self.db_path = db_path
        self.pool_size = pool_size
        self.closed = False
        self._idle: LifoQueue[sqlite3.Connection] = LifoQueue(maxsize=pool_size)
        self._opened = 0
        self._lock = threading.Lock()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self.db_path), timeout=DB_CONNECT_TIMEOUT, check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        logger.debug("Opened SQLite connection %d/%d", self._opened, self.pool_size)
        return conn

    def acquire(self) -> sqlite3.Connection:
        if self.closed:
            raise RuntimeError("Connection pool has been closed")

        try:
            return self._idle.get_nowait()
        except Empty:
            pass

        with self._lock:
            if self._opened < self.pool_size:
                self._opened += 1
                return self._open()

        try:
            return self._idle.get(timeout=DB_POOL_TIMEOUT)
        except Empty:
            counter("database.pool_exhausted")
            raise RuntimeError(
                f"Database connection pool exhausted (pool_size={self.pool_size})"
            ) from None

    def release(self, conn: sqlite3.Connection) -> None:
        if self.closed:
            conn.close()
            return
        try:
            self._idle.put_nowait(conn)
        except Full:
            conn.close()

    def close_all(self) -> None:
        """Close idle connections; checked-out ones close when released."""
        self.closed = True
        while True:
            try:
                self._idle.get_nowait().close()
            except Empty:
                break

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit when the block succeeds, roll back when it raises."""
        with self.connection() as conn:
            try:
                yield conn
            except Exception:
                conn.rollback()
                raise
            conn.commit()


def init_database(db_path: Path) -> None:
    """Create the database file, parent directory and tables if missing."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        with conn:
            conn.executescript(SCHEMA)
    finally:
        conn.close()
    logger.info("Database schema ready at %s", db_path)
