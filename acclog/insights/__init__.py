"""
Insights module - cached AI summaries per timeframe bucket.
"""

from acclog.insights.cache import InsightCache, is_stale
from acclog.insights.orchestrator import InsightOrchestrator, InsightState
from acclog.insights.ports import InsightGenerator
from acclog.insights.prompts import build_compliment_prompt, build_insight_prompt

__all__ = [
    "InsightCache",
    "InsightGenerator",
    "InsightOrchestrator",
    "InsightState",
    "build_compliment_prompt",
    "build_insight_prompt",
    "is_stale",
]
