"""
Logging setup shared by the CLI, the API and the environment.

Modules grab a logger with ``get_logger(__name__)`` at import time and log
with %-style arguments. Nothing is printed until ``configure_logging`` is
called once at startup (main.py, or a module's ``__main__`` block).
"""

from __future__ import annotations

import json as _json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import LOG_STORAGE_DIR, STORAGE_DIR

__all__ = ["STORAGE_DIR", "LOG_STORAGE_DIR", "configure_logging", "get_logger", "JsonFormatter"]

ROOT_LOGGER_NAME = "tag"
PLAIN_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Standard LogRecord attributes; anything else was passed via ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    level: str | int = "INFO",
    json: bool = False,
    log_file: Optional[str | Path] = None,
) -> logging.Logger:
    """
    Configure console (and optional file) logging for the application.

    Safe to call more than once; previously installed handlers are replaced.

    Args:
        level: Log level name or number
        json: Emit one JSON object per line instead of plain text
        log_file: Optional file path. Relative names are placed under
            storage/logs.

    Returns:
        The application root logger
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level if isinstance(level, int) else level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter: logging.Formatter = JsonFormatter() if json else logging.Formatter(PLAIN_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file is not None:
        path = Path(log_file)
        if not path.is_absolute():
            path = LOG_STORAGE_DIR / path
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the application root.

    ``get_logger("env.environment")`` -> ``tag.env.environment``.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
