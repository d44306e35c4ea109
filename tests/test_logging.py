"""Tests for _logging module."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Generator

import pytest

from record_sheets._logging import JsonFormatter, TextFormatter, get_logger, setup_logging
from record_sheets.testing import make_fake_env


@pytest.fixture(autouse=True)
def _clear_library_logger() -> Generator[None, None, None]:
    yield
    logger = logging.getLogger("record_sheets")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="record_sheets.spreadsheet",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Wrote %s",
        args=("sheet",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    output = JsonFormatter().format(_record(sheet="Employee", records=3, path=None))
    payload = json.loads(output)
    assert payload["level"] == "INFO"
    assert payload["logger"] == "record_sheets.spreadsheet"
    assert payload["message"] == "Wrote sheet"
    assert payload["sheet"] == "Employee"
    assert payload["records"] == 3
    assert payload["path"] is None
    assert "columns" not in payload


def test_json_formatter_stringifies_other_values() -> None:
    payload = json.loads(JsonFormatter().format(_record(sheet=("a", "b"))))
    assert payload["sheet"] == "('a', 'b')"


def test_json_formatter_includes_exception() -> None:
    record = _record()
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record.exc_info = sys.exc_info()
    payload = json.loads(JsonFormatter().format(record))
    assert "RuntimeError: boom" in payload["exc_info"]


def test_text_formatter_layout() -> None:
    line = TextFormatter().format(_record(sheet="Employee", columns=4))
    assert "[INFO]" in line
    assert "[record_sheets.spreadsheet]" in line
    assert "sheet=Employee" in line
    assert "columns=4" in line
    assert line.endswith("Wrote sheet")


def test_setup_logging_replaces_handlers() -> None:
    setup_logging(level="DEBUG", format_mode="json")
    logger = setup_logging(level="INFO")
    assert logger.name == "record_sheets"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, TextFormatter)


def test_setup_logging_reads_level_from_environment() -> None:
    env = make_fake_env()
    env.set("RECORD_SHEETS_LOG_LEVEL", "error")
    logger = setup_logging(format_mode="json")
    assert logger.level == logging.ERROR
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_setup_logging_writes_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    setup_logging(level="DEBUG")
    get_logger("record_sheets.document").debug("Saved workbook", extra={"path": "book.xlsx"})
    captured = capsys.readouterr()
    assert "path=book.xlsx" in captured.out
    assert "Saved workbook" in captured.out


def test_get_logger_is_named() -> None:
    assert get_logger("record_sheets.grid").name == "record_sheets.grid"
