"""
Logging setup.

Every acclog module logs under the "acclog" logger, which owns a single
stderr handler. The level comes from ACCLOG_LOG_LEVEL unless
configure_logging() sets it explicitly (the CLI does, so command output on
stdout is not interleaved with INFO chatter).
"""

from __future__ import annotations

import logging
import os
from typing import Final

PACKAGE_LOGGER: Final[str] = "acclog"
_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_handler: logging.Handler | None = None


def _parse_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv("ACCLOG_LOG_LEVEL", "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the handler (once) and set the package level."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        package_logger.addHandler(_handler)
    package_logger.setLevel(_parse_level(level))
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Module logger under the acclog hierarchy; levels are inherited."""
    if _handler is None:
        configure_logging()
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
