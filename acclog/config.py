"""Centralized configuration for the accomplishment journal.

Re-exports everything from acclog.infrastructure.settings so callers have a
single import point, then adds typed constants for validation, insights,
LLM and database tuning.  Environment variable overrides use safe defaults
so the app starts without extra env configuration.
"""

from __future__ import annotations

import os

from acclog.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_VERSION: str = "0.1.0"

# --- Entries ---
RATING_MIN: int = 1
RATING_MAX: int = 10

# --- Insights ---
INSIGHT_MAX_ENTRIES: int = 100
COMPLIMENT_MAX_TOKENS: int = 120

# --- Database ---
DB_POOL_SIZE: int = int(os.getenv("ACCLOG_DB_POOL_SIZE", "3"))
DB_POOL_TIMEOUT: float = float(os.getenv("ACCLOG_DB_POOL_TIMEOUT", "5.0"))
DB_CONNECT_TIMEOUT: float = float(os.getenv("ACCLOG_DB_CONNECT_TIMEOUT", "30.0"))
DB_RETRY_MAX: int = int(os.getenv("ACCLOG_DB_RETRY_MAX", "5"))
DB_RETRY_BASE_DELAY: float = float(os.getenv("ACCLOG_DB_RETRY_BASE_DELAY", "0.1"))
DB_RETRY_MAX_DELAY: float = float(os.getenv("ACCLOG_DB_RETRY_MAX_DELAY", "2.0"))
DB_RETRY_JITTER: float = float(os.getenv("ACCLOG_DB_RETRY_JITTER", "0.1"))

# --- LLM ---
LLM_TIMEOUT_SECONDS: int = int(os.getenv("ACCLOG_LLM_TIMEOUT", "30"))
LLM_MAX_RETRIES: int = int(os.getenv("ACCLOG_LLM_MAX_RETRIES", "3"))
