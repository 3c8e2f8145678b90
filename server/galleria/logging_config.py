"""Logging setup: a JSON formatter for log shipping and the handler wiring.

JSON records look like::

    {"timestamp": "...", "level": "INFO", "category": "content",
     "logger": "galleria.content.lifecycle", "message": "...",
     "user_id": "u_...", "extra": {...}}

The category comes from the logger name. ``user_id`` (the acting user, passed
through ``extra=``) is lifted to the top level; anything else passed through
``extra=`` lands under ``"extra"``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, TextIO

# Longest prefix wins, so sub-packages can be split out later
CATEGORIES: tuple[tuple[str, str], ...] = (
    ("galleria.auth", "auth"),
    ("galleria.content", "content"),
    ("galleria.store", "store"),
    ("galleria.routes", "http"),
    ("galleria.main", "http"),
    ("galleria.error_handlers", "http"),
    ("uvicorn", "http"),
    ("fastapi", "http"),
)
DEFAULT_CATEGORY = "system"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
QUIET_LOGGERS = ("watchfiles", "httpcore", "httpx", "multipart")

# Attributes every LogRecord has; whatever else is on a record came from extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


def category_for(logger_name: str) -> str:
    matches = [
        (prefix, category)
        for prefix, category in CATEGORIES
        if logger_name == prefix or logger_name.startswith(prefix + ".")
    ]
    if not matches:
        return DEFAULT_CATEGORY
    return max(matches, key=lambda m: len(m[0]))[1]


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, UTC)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "category": category_for(record.name),
            "logger": record.name,
            "message": record.getMessage(),
        }

        user_id = getattr(record, "user_id", None)
        if user_id is not None:
            payload["user_id"] = user_id

        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key != "user_id" and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


class ErrorFilter(logging.Filter):
    """Pass ERROR and CRITICAL only."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _rotating_handler(path: str, formatter: logging.Formatter, backups: int) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=backups, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(
    *,
    json_format: bool = True,
    log_level: int = logging.INFO,
    log_file: str | None = None,
    error_log_file: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Replace the root logger's handlers.

    Args:
        json_format: StructuredFormatter output instead of one plain line per record
        log_level: Root logger level
        log_file: Rotating file receiving every record (None to skip)
        error_log_file: Rotating file receiving ERROR and above (None to skip)
        stream: Console stream (default: sys.stderr)
    """
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    formatter: logging.Formatter
    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S"
        )

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        root.addHandler(_rotating_handler(log_file, formatter, backups=5))
    if error_log_file:
        errors = _rotating_handler(error_log_file, formatter, backups=10)
        errors.addFilter(ErrorFilter())
        root.addHandler(errors)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_production_logging(log_dir: str | Path) -> None:
    """JSON to stderr plus rotating app.log and error.log in log_dir."""
    log_dir = Path(log_dir)
    configure_logging(
        json_format=True,
        log_file=str(log_dir / "app.log"),
        error_log_file=str(log_dir / "error.log"),
    )


def setup_dev_logging(json_format: bool = False) -> None:
    configure_logging(json_format=json_format, log_level=logging.INFO)
