"""Logging helpers for record_sheets.

The library only creates named loggers; it never configures handlers on
import. Applications that want output call setup_logging() once.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Literal

from record_sheets.config import LogLevel, load_settings

LogFormat = Literal["json", "text"]

_ROOT_LOGGER_NAME = "record_sheets"

# Structured fields attached through `extra=` by the reader/writer
_EXTRA_FIELDS: tuple[str, ...] = ("sheet", "records", "columns", "path")


class JsonFormatter(logging.Formatter):
    """JSON formatter producing one object per record.

    Includes timestamp (UTC), level, logger, message, the structured fields
    present on the record, and exception info if present.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        payload: dict[str, str | int | float | bool | None] = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field_name in _EXTRA_FIELDS:
            if field_name not in record.__dict__:
                continue
            raw_value: object = record.__dict__[field_name]
            if isinstance(raw_value, (str, int, float, bool)) or raw_value is None:
                payload[field_name] = raw_value
            else:
                payload[field_name] = str(raw_value)

        if record.exc_info is not None:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter.

    Format: [timestamp] [LEVEL] [logger] [extra_fields] message
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as human-readable text."""
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        parts: list[str] = [
            f"[{timestamp}]",
            f"[{record.levelname}]",
            f"[{record.name}]",
        ]

        for field_name in _EXTRA_FIELDS:
            if hasattr(record, field_name):
                attr_value: object = getattr(record, field_name)
                parts.append(f"{field_name}={attr_value}")

        parts.append(record.getMessage())

        line = " ".join(parts)

        if record.exc_info is not None:
            line = line + "\n" + self.formatException(record.exc_info)

        return line


def _level_to_int(level: LogLevel) -> int:
    """Convert string log level to integer constant."""
    level_map: dict[LogLevel, int] = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map[level]


def setup_logging(
    *,
    level: LogLevel | None = None,
    format_mode: LogFormat = "text",
) -> logging.Logger:
    """Attach a stdout handler to the library's logger.

    Clears handlers previously attached to the "record_sheets" logger so
    repeated calls do not duplicate output. The root logger is left alone.

    Args:
        level: Log level; RECORD_SHEETS_LOG_LEVEL (default WARNING) if None.
        format_mode: "json" for structured output, "text" for development.

    Returns:
        The configured "record_sheets" logger.
    """
    resolved: LogLevel = level if level is not None else load_settings()["log_level"]

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(_level_to_int(resolved))

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    if format_mode == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(TextFormatter())

    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance by name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


__all__ = [
    "JsonFormatter",
    "LogFormat",
    "TextFormatter",
    "get_logger",
    "setup_logging",
]
