"""Configuration for braindump.

Environment variables (a ``.env`` file in the working directory is honoured):
    BRAINDUMP_HOME          – store directory (default: ``~/.braindump``)
    BRAINDUMP_SEARCH_LIMIT  – maximum index hits per search (default: 100)
    BRAINDUMP_LOG_LEVEL     – level used by :func:`configure_logging`
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def default_store_path() -> Path:
    return Path(get_env("BRAINDUMP_HOME") or Path.home() / ".braindump").expanduser()


def search_limit() -> int:
    limit = get_env_int("BRAINDUMP_SEARCH_LIMIT", 100)
    if limit < 1:
        logger.warning("Ignoring non-positive BRAINDUMP_SEARCH_LIMIT=%s", limit)
        return 100
    return limit


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stderr handler to the ``braindump`` logger (idempotent)."""
    logger = logging.getLogger("braindump")
    if level is None:
        level = get_env("BRAINDUMP_LOG_LEVEL", "WARNING")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
