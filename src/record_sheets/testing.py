"""Test hooks for record_sheets library.

This module provides hooks for testing without mocking or monkeypatching.
Production code calls hooks directly; tests set hooks to fakes.

Usage:
    from record_sheets.testing import hooks, reset_hooks

    # In tests:
    def test_something() -> None:
        hooks.create_workbook = _fake_factory
        # ... test code ...

    # Use reset_hooks() in conftest.py fixtures to restore defaults.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from record_sheets._protocols.openpyxl import WorkbookProtocol

# ---------------------------------------------------------------------------
# Type aliases for hooks
# ---------------------------------------------------------------------------

CreateWorkbookFn = Callable[[], WorkbookProtocol]
LoadWorkbookFn = Callable[[Path], WorkbookProtocol]
PathExistsFn = Callable[[Path], bool]
GetEnvFn = Callable[[str], str | None]


# ---------------------------------------------------------------------------
# Hooks container
# ---------------------------------------------------------------------------


class _HooksContainer:
    """Container for all hookable functions.

    Hooks are set to production implementations at module load time.
    Tests override hooks to use fakes.
    """

    create_workbook: CreateWorkbookFn
    load_workbook: LoadWorkbookFn
    path_exists: PathExistsFn
    get_env: GetEnvFn


hooks = _HooksContainer()


# ---------------------------------------------------------------------------
# Production implementations (wrappers that call real modules)
# ---------------------------------------------------------------------------


def _prod_create_workbook() -> WorkbookProtocol:
    """Production implementation: new openpyxl workbook."""
    from record_sheets._protocols.openpyxl import _create_workbook

    return _create_workbook()


def _prod_load_workbook(path: Path) -> WorkbookProtocol:
    """Production implementation: load openpyxl workbook from disk."""
    from record_sheets._protocols.openpyxl import _load_workbook

    return _load_workbook(path)


def _prod_path_exists(path: Path) -> bool:
    """Production implementation: check the file exists."""
    return path.is_file()


def _prod_get_env(key: str) -> str | None:
    """Production implementation: read from os.environ."""
    import os

    return os.getenv(key)


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------


def _init_production_hooks() -> None:
    """Initialize hooks to production implementations.

    Called at module load time and by reset_hooks().
    """
    hooks.create_workbook = _prod_create_workbook
    hooks.load_workbook = _prod_load_workbook
    hooks.path_exists = _prod_path_exists
    hooks.get_env = _prod_get_env


def reset_hooks() -> None:
    """Reset all hooks to production implementations.

    Use in conftest.py autouse fixture for test isolation.
    """
    _init_production_hooks()


# Initialize hooks to production implementations at module load
_init_production_hooks()


# ---------------------------------------------------------------------------
# Fake implementations for tests
# ---------------------------------------------------------------------------


class FakeEnv:
    """In-memory environment installed as hooks.get_env."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def unset(self, key: str) -> None:
        self._values.pop(key, None)

    def get(self, key: str) -> str | None:
        return self._values.get(key)


def make_fake_env() -> FakeEnv:
    """Install an empty fake environment and return it for setting values."""
    env = FakeEnv()
    hooks.get_env = env.get
    return env


__all__ = [
    "CreateWorkbookFn",
    "FakeEnv",
    "GetEnvFn",
    "LoadWorkbookFn",
    "PathExistsFn",
    "hooks",
    "make_fake_env",
    "reset_hooks",
]
