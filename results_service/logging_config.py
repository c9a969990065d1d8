from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DEFAULT_LEVEL = logging.INFO


def _resolve_level(raw: str | None) -> int:
    if not raw:
        return DEFAULT_LEVEL
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else DEFAULT_LEVEL


def setup_logging() -> None:
    """Configure the root logger from LOG_LEVEL and LOG_FILE."""
    level = _resolve_level(os.environ.get("LOG_LEVEL"))
    log_file = os.environ.get("LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    root_logger.addHandler(handler)
