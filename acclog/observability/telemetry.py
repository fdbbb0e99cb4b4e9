"""
In-process telemetry for the journal.

Nothing is shipped externally. Counters and latency samples live in memory
so /health can report them and tests can assert on them. Event fields must
never include entry text; ids, keys and counts only.
"""

from __future__ import annotations

import contextlib
import threading
import time
from collections.abc import Iterator
from typing import Any

from acclog.observability.logging import get_logger

logger = get_logger("acclog.telemetry")

# Counters are bumped from worker threads (asyncio.to_thread)
_lock = threading.Lock()
_COUNTERS: dict[str, int] = {}
_LATENCIES_MS: dict[str, list[float]] = {}


def log_event(event_name: str, **fields: Any) -> None:
    """Structured info log: `event=<name> key=value ...`."""
    rendered = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
    logger.info("event=%s %s", event_name, rendered)


def counter(name: str, increment: int = 1) -> int:
    with _lock:
        value = _COUNTERS.get(name, 0) + increment
        _COUNTERS[name] = value
    logger.debug("counter=%s value=%s", name, value)
    return value


def get_counter(name: str) -> int:
    with _lock:
        return _COUNTERS.get(name, 0)


def counters(prefix: str = "") -> dict[str, int]:
    """Snapshot of counters whose name starts with prefix."""
    with _lock:
        return {k: v for k, v in sorted(_COUNTERS.items()) if k.startswith(prefix)}


@contextlib.contextmanager
def time_block(metric_name: str) -> Iterator[None]:
    """Record the wall time of the block, in milliseconds, under metric_name."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("timing=%s ms=%.1f", metric_name, elapsed_ms)
        with _lock:
            _LATENCIES_MS.setdefault(metric_name, []).append(elapsed_ms)


def get_latency_stats(metric_name: str) -> dict[str, float]:
    """count/min/max/avg/p95 in milliseconds; zeros when nothing was recorded."""
    with _lock:
        samples = sorted(_LATENCIES_MS.get(metric_name, []))
    if not samples:
        return {"count": 0, "min": 0.0, "max": 0.0, "avg": 0.0, "p95": 0.0}

    count = len(samples)
    return {
        "count": count,
        "min": samples[0],
        "max": samples[-1],
        "avg": sum(samples) / count,
        "p95": samples[min(int(count * 0.95), count - 1)],
    }


def reset_counters() -> None:
    """Clear counters and latency samples (tests)."""
    with _lock:
        _COUNTERS.clear()
        _LATENCIES_MS.clear()
