"""Structured logging helpers for the expense tracking backend."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Final

CONSOLE_FORMAT: Final[str] = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL: Final[str] = "INFO"
LOG_DIR: Final[Path] = Path("logs")
LOG_PATH: Final[Path] = LOG_DIR / "expense_tracker.log"
CONSOLE_MARKER: Final[str] = "_expense_console"
JSON_MARKER: Final[str] = "_expense_json"
REQUEST_FIELDS: Final[tuple[str, ...]] = ("method", "path", "status_code", "duration_ms", "user_id")


class JsonLogFormatter(logging.Formatter):
    """Format log records as single-line JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        payload = {
            "timestamp": timestamp,
            "level": record.levelname,
            "source": record.name,
            "message": record.getMessage(),
        }
        for field in REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value if isinstance(value, (int, float)) else str(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _json_file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    handler.setFormatter(JsonLogFormatter())
    return handler


def _attach_once(
    logger: logging.Logger,
    marker: str,
    factory: Callable[[], logging.Handler],
    level: int,
) -> None:
    handler = next((h for h in logger.handlers if getattr(h, marker, False)), None)
    if handler is None:
        handler = factory()
        setattr(handler, marker, True)
        logger.addHandler(handler)
    handler.setLevel(level)


def setup_logger(
    name: str,
    json_format: bool = False,
    level: str | int = DEFAULT_LEVEL,
) -> logging.Logger:
    """Configure and return a logger with console and optional JSON file output.

    ``level`` and ``json_format`` normally come from :class:`~expense_tracker.config.Settings`.
    Calling it repeatedly for the same name only adjusts levels; handlers are
    attached once.
    """

    resolved_level = _level_number(level)
    logger = logging.getLogger(name)
    logger.setLevel(resolved_level)
    # Keep propagation so pytest's caplog still sees the records.
    logger.propagate = True
    _attach_once(logger, CONSOLE_MARKER, _console_handler, resolved_level)
    if json_format:
        _attach_once(logger, JSON_MARKER, _json_file_handler, resolved_level)
    return logger


__all__ = ["JsonLogFormatter", "setup_logger"]
