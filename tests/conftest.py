"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from record_sheets.config import SpreadsheetSettings, default_settings
from record_sheets.testing import reset_hooks


@pytest.fixture(autouse=True)
def _restore_hooks() -> Generator[None, None, None]:
    """Restore production hooks after each test."""
    yield
    reset_hooks()


def _make_settings() -> SpreadsheetSettings:
    settings = default_settings()
    settings["max_columns"] = 200
    settings["max_rows"] = 2_000
    return settings


def _make_workbook_path(tmp_path: Path) -> Path:
    return tmp_path / "Company.xlsx"


settings = pytest.fixture(_make_settings)
workbook_path = pytest.fixture(_make_workbook_path)
