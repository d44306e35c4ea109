"""Protocol definitions for openpyxl library.

Provides type-safe interfaces to openpyxl Workbook, Worksheet, Cell, and the
formatting objects used by column decorations, without importing openpyxl
at module level.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from pathlib import Path
from typing import Protocol

from record_sheets.types.common import CellValue


class CommentProtocol(Protocol):
    """Protocol for openpyxl Comment."""

    text: str
    author: str


class CellProtocol(Protocol):
    """Protocol for openpyxl Cell."""

    value: CellValue
    number_format: str
    comment: CommentProtocol | None


class SheetViewProtocol(Protocol):
    """Protocol for openpyxl SheetView."""

    tabSelected: bool  # noqa: N815


class DimensionProtocol(Protocol):
    """Protocol for openpyxl ColumnDimension / RowDimension."""

    width: float
    number_format: str


class _ColorScaleRuleProtocol(Protocol):
    """Protocol for openpyxl conditional formatting Rule - internal use only."""

    type: str


class ConditionalFormattingProtocol(Protocol):
    """Protocol for openpyxl ConditionalFormattingList."""

    def add(self, range_string: str, cfRule: _ColorScaleRuleProtocol) -> None:  # noqa: N803
        """Register a rule over a cell range."""
        ...


class WorksheetProtocol(Protocol):
    """Protocol for openpyxl Worksheet."""

    def cell(self, row: int, column: int, value: CellValue = None) -> CellProtocol:
        """Get or create cell at 1-based (row, column)."""
        ...

    def __getitem__(self, key: str) -> CellProtocol:
        """Get cell by label such as "B2"."""
        ...

    @property
    def column_dimensions(self) -> MutableMapping[str, DimensionProtocol]:
        """Return column dimensions mapping keyed by letters."""
        ...

    @property
    def row_dimensions(self) -> MutableMapping[int, DimensionProtocol]:
        """Return row dimensions mapping keyed by 1-based row."""
        ...

    @property
    def conditional_formatting(self) -> ConditionalFormattingProtocol:
        """Return conditional formatting rules of the sheet."""
        ...

    @property
    def sheet_view(self) -> SheetViewProtocol:
        """Return the primary view of the sheet."""
        ...

    @property
    def max_row(self) -> int:
        """Return maximum row number with data."""
        ...

    @property
    def max_column(self) -> int:
        """Return maximum column number with data."""
        ...

    @property
    def title(self) -> str:
        """Return worksheet title."""
        ...

    @title.setter
    def title(self, value: str) -> None:
        """Set worksheet title."""
        ...


class WorkbookProtocol(Protocol):
    """Protocol for openpyxl Workbook."""

    @property
    def sheetnames(self) -> list[str]:
        """Return list of sheet names."""
        ...

    def __getitem__(self, name: str) -> WorksheetProtocol:
        """Get worksheet by name."""
        ...

    def create_sheet(self, title: str, index: int | None = None) -> WorksheetProtocol:
        """Create a new worksheet, optionally at a position."""
        ...

    def remove(self, worksheet: WorksheetProtocol) -> None:
        """Remove a worksheet."""
        ...

    def save(self, filename: str | Path) -> None:
        """Save workbook to file."""
        ...

    def close(self) -> None:
        """Close workbook."""
        ...

    @property
    def active(self) -> WorksheetProtocol | None:
        """Return active worksheet."""
        ...

    @active.setter
    def active(self, value: int) -> None:
        """Set active worksheet by index."""
        ...


class _LoadWorkbookFn(Protocol):
    """Protocol for openpyxl load_workbook function."""

    def __call__(
        self, filename: Path, read_only: bool = False, data_only: bool = False
    ) -> WorkbookProtocol: ...


class _WorkbookCtor(Protocol):
    """Protocol for openpyxl.Workbook constructor."""

    def __call__(self) -> WorkbookProtocol: ...


class _ColorScaleRuleFn(Protocol):
    """Protocol for openpyxl.formatting.rule.ColorScaleRule factory."""

    def __call__(
        self,
        *,
        start_type: str,
        start_value: int,
        start_color: str,
        mid_type: str,
        mid_value: int,
        mid_color: str,
        end_type: str,
        end_value: int,
        end_color: str,
    ) -> _ColorScaleRuleProtocol: ...


class _CommentCtor(Protocol):
    """Protocol for openpyxl.comments.Comment constructor."""

    def __call__(self, text: str, author: str) -> CommentProtocol: ...


class _GetColumnLetterFn(Protocol):
    """Protocol for openpyxl.utils.get_column_letter function."""

    def __call__(self, col_idx: int) -> str: ...


def _load_workbook(path: Path) -> WorkbookProtocol:
    """Load an editable workbook with proper typing via Protocol.

    Formulas are kept as formulas (data_only=False) so a rewrite keeps them.

    Args:
        path: Path to Excel file.

    Returns:
        WorkbookProtocol for the loaded workbook.
    """
    openpyxl_mod = __import__("openpyxl")
    load_fn: _LoadWorkbookFn = openpyxl_mod.load_workbook
    return load_fn(path, read_only=False, data_only=False)


def _create_workbook() -> WorkbookProtocol:
    """Create a new openpyxl Workbook with strict typing.

    Returns:
        WorkbookProtocol for the new workbook.
    """
    openpyxl_mod = __import__("openpyxl")
    ctor: _WorkbookCtor = openpyxl_mod.Workbook
    return ctor()


def _get_column_letter(col_idx: int) -> str:
    """Get Excel column letter via typed Protocol.

    Args:
        col_idx: 1-based column index.

    Returns:
        Column letter (e.g., "A", "B", "AA").
    """
    utils_mod = __import__("openpyxl.utils", fromlist=["get_column_letter"])
    fn: _GetColumnLetterFn = utils_mod.get_column_letter
    return fn(col_idx)


def _create_color_scale_rule(
    *,
    low: str,
    middle: str,
    high: str,
) -> _ColorScaleRuleProtocol:
    """Create a three-point percentile color scale rule.

    Args:
        low: Color for the 0th percentile as RRGGBB or AARRGGBB hex.
        middle: Color for the 50th percentile.
        high: Color for the 100th percentile.

    Returns:
        Rule ready to be added to a sheet's conditional formatting.
    """
    rule_mod = __import__("openpyxl.formatting.rule", fromlist=["ColorScaleRule"])
    factory: _ColorScaleRuleFn = rule_mod.ColorScaleRule
    return factory(
        start_type="percentile",
        start_value=0,
        start_color=low,
        mid_type="percentile",
        mid_value=50,
        mid_color=middle,
        end_type="percentile",
        end_value=100,
        end_color=high,
    )


def _create_comment(text: str, author: str) -> CommentProtocol:
    """Create openpyxl Comment.

    Args:
        text: Comment body.
        author: Comment author shown by spreadsheet applications.

    Returns:
        CommentProtocol instance.
    """
    comments_mod = __import__("openpyxl.comments", fromlist=["Comment"])
    ctor: _CommentCtor = comments_mod.Comment
    return ctor(text, author)


__all__ = [
    "CellProtocol",
    "CommentProtocol",
    "ConditionalFormattingProtocol",
    "DimensionProtocol",
    "SheetViewProtocol",
    "WorkbookProtocol",
    "WorksheetProtocol",
    "_create_color_scale_rule",
    "_create_comment",
    "_create_workbook",
    "_get_column_letter",
    "_load_workbook",
]
