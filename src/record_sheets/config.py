"""Environment-driven settings for record_sheets.

All settings have defaults; environment variables override them. Values are
parsed strictly: malformed numbers or booleans raise ValueError instead of
silently falling back to the default.
"""

from __future__ import annotations

from typing import Literal, TypedDict

from record_sheets.testing import hooks

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_PREFIX = "RECORD_SHEETS_"

DEFAULT_MAX_COLUMNS = 10_000
DEFAULT_MAX_ROWS = 100_000
DEFAULT_COMMENT_AUTHOR = "record_sheets"

_LOG_LEVELS: dict[str, LogLevel] = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
}


class SpreadsheetSettings(TypedDict):
    """Settings shared by the document facade and the reader/writer.

    Attributes:
        max_columns: Safety limit for the header probe.
        max_rows: Safety limit for the data-row probe.
        auto_fit: Whether close() sizes columns to their content.
        comment_author: Author stamped on tooltip comments.
        log_level: Level applied by setup_logging when no level is passed.
    """

    max_columns: int
    max_rows: int
    auto_fit: bool
    comment_author: str
    log_level: LogLevel


def _optional_env_str(key: str) -> str | None:
    value = hooks.get_env(key)
    if value is None:
        return None
    trimmed = value.strip()
    if trimmed == "":
        return None
    return trimmed


def _parse_str(key: str, default: str) -> str:
    val = _optional_env_str(key)
    return val if val is not None else default


def _parse_positive_int(key: str, default: int) -> int:
    val = _optional_env_str(key)
    if val is None:
        return default
    parsed = int(val)
    if parsed <= 0:
        raise ValueError(f"{key} must be positive, got {parsed}")
    return parsed


def _parse_bool(key: str, default: bool) -> bool:
    val = _optional_env_str(key)
    if val is None:
        return default
    normalized = val.lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {key}: {val!r}")


def _parse_log_level(key: str, default: LogLevel) -> LogLevel:
    val = _optional_env_str(key)
    if val is None:
        return default
    level = _LOG_LEVELS.get(val.upper())
    if level is None:
        raise ValueError(f"Invalid log level for {key}: {val!r}")
    return level


def default_settings() -> SpreadsheetSettings:
    """Return settings with every value at its default, ignoring the environment."""
    return SpreadsheetSettings(
        max_columns=DEFAULT_MAX_COLUMNS,
        max_rows=DEFAULT_MAX_ROWS,
        auto_fit=True,
        comment_author=DEFAULT_COMMENT_AUTHOR,
        log_level="WARNING",
    )


def load_settings() -> SpreadsheetSettings:
    """Load settings from RECORD_SHEETS_* environment variables.

    Returns:
        Settings with environment overrides applied.

    Raises:
        ValueError: If a variable is present but malformed.
    """
    defaults = default_settings()
    return SpreadsheetSettings(
        max_columns=_parse_positive_int(f"{_ENV_PREFIX}MAX_COLUMNS", defaults["max_columns"]),
        max_rows=_parse_positive_int(f"{_ENV_PREFIX}MAX_ROWS", defaults["max_rows"]),
        auto_fit=_parse_bool(f"{_ENV_PREFIX}AUTO_FIT", defaults["auto_fit"]),
        comment_author=_parse_str(f"{_ENV_PREFIX}COMMENT_AUTHOR", defaults["comment_author"]),
        log_level=_parse_log_level(f"{_ENV_PREFIX}LOG_LEVEL", defaults["log_level"]),
    )


__all__ = [
    "DEFAULT_COMMENT_AUTHOR",
    "DEFAULT_MAX_COLUMNS",
    "DEFAULT_MAX_ROWS",
    "LogLevel",
    "SpreadsheetSettings",
    "default_settings",
    "load_settings",
]
