"""Logging setup for the command-line entrypoint.

Prompt output goes to stdout, so log records always go to stderr. The level
comes from ``--log-level``, then ``$PROMPTLINE_LOG``, defaulting to WARNING so
aborted modules are reported while "not applicable" chatter stays hidden.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_ENV = "PROMPTLINE_LOG"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map a level name to a ``logging`` level, falling back to WARNING."""
    name = (level or os.environ.get(LOG_ENV) or DEFAULT_LOG_LEVEL).upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: str | None = None) -> logging.Logger:
    """Install a single stderr handler on the ``promptline`` logger."""
    logger = logging.getLogger("promptline")
    logger.setLevel(resolve_log_level(level))
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


__all__ = [
    "LOG_ENV",
    "resolve_log_level",
    "setup_logging",
]
