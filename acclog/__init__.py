"""Accomplishment journal - monthly/yearly timeframes with cached AI insights"""

from __future__ import annotations

__version__ = "0.1.0"


# Lazy imports for journal and insights modules
def __getattr__(name: str):
    """
    Lazy imports to avoid loading heavy dependencies when only importing lightweight modules.
    """
    if name in ("Entry", "EntryCreate", "Granularity", "Insight"):
        from acclog.journal import models

        return getattr(models, name)

    if name == "BucketNavigator":
        from acclog.journal.navigator import BucketNavigator

        return BucketNavigator

    if name in ("InsightCache", "InsightOrchestrator"):
        from acclog.insights import cache, orchestrator

        if name == "InsightCache":
            return cache.InsightCache
        return orchestrator.InsightOrchestrator

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "BucketNavigator",
    "Entry",
    "EntryCreate",
    "Granularity",
    "Insight",
    "InsightCache",
    "InsightOrchestrator",
]
