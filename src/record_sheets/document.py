"""Document facade over an openpyxl workbook.

SpreadsheetDocument exposes the handful of grid operations the
reader/writer needs, addressed by cell labels ("B7") on the currently
selected sheet. It knows nothing about records or schemas.

Every operation on a closed document raises DisposedError; close() itself
is idempotent.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from pathlib import Path

from record_sheets._exceptions import DisposedError
from record_sheets._logging import get_logger
from record_sheets._protocols.openpyxl import (
    WorkbookProtocol,
    WorksheetProtocol,
    _create_color_scale_rule,
    _create_comment,
    _get_column_letter,
)
from record_sheets.config import DEFAULT_COMMENT_AUTHOR
from record_sheets.grid import cell, parse_cell
from record_sheets.testing import hooks
from record_sheets.types.common import CellValue, Flow

_logger = get_logger(__name__)

DEFAULT_SHEET_NAME = "Sheet"

# Last addressable row / column of the xlsx grid
_MAX_SHEET_ROW = 1_048_576
_LAST_COLUMN_LETTERS = "XFD"

# Auto-fit width bounds, in characters
_MIN_WIDTH = 8
_MAX_WIDTH = 50
_WIDTH_PADDING = 2


def cell_to_string(value: CellValue) -> str:
    """Return the invariant string representation of a stored cell value.

    Empty cells become "". Integral floats drop the trailing ".0" so a
    number written as "10" reads back as "10".
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return str(value)


class SpreadsheetDocument:
    """A workbook bound to a file path, with one selected sheet at a time.

    Sheet names are matched case-insensitively, as spreadsheet applications
    do; the title stored in the workbook is what gets selected.

    The used extent of each sheet (max row and column) is taken from openpyxl
    once and then tracked as cells are written, so cell reads stay O(1).

    Not thread-safe: one owner manipulates one open document.
    """

    def __init__(
        self,
        path: Path,
        workbook: WorkbookProtocol,
        comment_author: str = DEFAULT_COMMENT_AUTHOR,
    ) -> None:
        self._path = path
        self._workbook: WorkbookProtocol | None = workbook
        self._comment_author = comment_author
        self._selected: str | None = None
        self._extents: dict[str, tuple[int, int]] = {}
        active = workbook.active
        self._active_name: str | None = active.title if active is not None else None

    @classmethod
    def open(cls, path: Path, comment_author: str = DEFAULT_COMMENT_AUTHOR) -> SpreadsheetDocument:
        """Open the workbook at `path`, or start an empty one if it does not exist.

        A new workbook starts without sheets; the placeholder sheet openpyxl
        creates is removed so the first written record type becomes the
        first sheet.
        """
        if hooks.path_exists(path):
            workbook = hooks.load_workbook(path)
            _logger.debug("Opened workbook", extra={"path": str(path)})
        else:
            workbook = hooks.create_workbook()
            for name in list(workbook.sheetnames):
                workbook.remove(workbook[name])
            _logger.debug("Created workbook", extra={"path": str(path)})
        return cls(path, workbook, comment_author)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._workbook is None

    @property
    def comment_author(self) -> str:
        return self._comment_author

    @property
    def selected_sheet(self) -> str | None:
        self._wb()
        return self._selected

    def _wb(self) -> WorkbookProtocol:
        if self._workbook is None:
            raise DisposedError(str(self._path))
        return self._workbook

    def _ws(self) -> WorksheetProtocol:
        wb = self._wb()
        if self._selected is None:
            raise RuntimeError("No sheet selected")
        return wb[self._selected]

    def _title(self, name: str) -> str | None:
        """Return the stored title matching `name` case-insensitively."""
        wanted = name.lower()
        for title in self._wb().sheetnames:
            if title.lower() == wanted:
                return title
        return None

    def _extent(self) -> tuple[int, int]:
        """(max row, max column) in use on the selected sheet, 1-based."""
        ws = self._ws()
        title = ws.title
        extent = self._extents.get(title)
        if extent is None:
            extent = (ws.max_row, ws.max_column)
            self._extents[title] = extent
        return extent

    def _grow(self, column: int, row: int) -> None:
        max_row, max_column = self._extent()
        title = self._ws().title
        self._extents[title] = (max(max_row, row + 1), max(max_column, column + 1))

    # -- sheets ------------------------------------------------------------

    def sheet_names(self) -> list[str]:
        return list(self._wb().sheetnames)

    def select_sheet(self, name: str) -> bool:
        """Select an existing sheet. Returns False if there is none by that name."""
        title = self._title(name)
        if title is None:
            return False
        self._selected = title
        return True

    def create_sheet(self, name: str, index: int | None = None) -> bool:
        """Create and select a sheet. Returns False (and selects it) if it exists."""
        wb = self._wb()
        title = self._title(name)
        if title is not None:
            self._selected = title
            return False
        wb.create_sheet(title=name, index=index)
        self._extents.pop(name, None)
        self._selected = name
        return True

    def delete_sheet(self, name: str) -> bool:
        """Delete a sheet. Returns False if there is none by that name."""
        wb = self._wb()
        title = self._title(name)
        if title is None:
            return False
        wb.remove(wb[title])
        self._extents.pop(title, None)
        if self._selected == title:
            self._selected = None
        return True

    def clear_sheet(self, name: str) -> None:
        """Replace a sheet with an empty one at the same position and select it.

        The new sheet is titled `name`, even if the old title differed in case.
        """
        title = self._title(name)
        index: int | None = None
        if title is not None:
            index = self._wb().sheetnames.index(title)
            self.delete_sheet(title)
        self.create_sheet(name, index)

    def set_active(self, name: str) -> bool:
        """Make `name` the sheet shown when the file is opened."""
        title = self._title(name)
        if title is None:
            return False
        self._active_name = title
        return True

    # -- cells -------------------------------------------------------------

    def _peek(self, label: str) -> CellValue:
        ws = self._ws()
        column, row = parse_cell(label)
        max_row, max_column = self._extent()
        if row + 1 > max_row or column + 1 > max_column:
            return None
        return ws.cell(row=row + 1, column=column + 1).value

    def get_string(self, label: str) -> str:
        """Return the cell's string representation, "" when empty."""
        return cell_to_string(self._peek(label))

    def has_value(self, label: str) -> bool:
        return self.get_string(label) != ""

    def set_string(self, label: str, text: str) -> None:
        self._ws()[label].value = text
        self._grow(*parse_cell(label))

    def set_numeric(self, label: str, number: int | float | Decimal) -> None:
        self._ws()[label].value = number
        self._grow(*parse_cell(label))

    # -- styling -----------------------------------------------------------

    def set_line_format(self, index: int, code: str, flow: Flow) -> None:
        """Set a number format on a whole column (a row under vertical flow).

        The dimension style covers cells added later; cells already written
        on that line get the format directly.
        """
        ws = self._ws()
        max_row, max_column = self._extent()
        if flow == "vertical":
            ws.row_dimensions[index + 1].number_format = code
            for column in range(1, max_column + 1):
                ws.cell(row=index + 1, column=column).number_format = code
        else:
            ws.column_dimensions[_get_column_letter(index + 1)].number_format = code
            for row in range(1, max_row + 1):
                ws.cell(row=row, column=index + 1).number_format = code

    def add_color_scale(
        self,
        index: int,
        *,
        low: str,
        middle: str,
        high: str,
        flow: Flow,
    ) -> None:
        """Register a percentile color scale over a whole column (or row)."""
        ws = self._ws()
        if flow == "vertical":
            row = index + 1
            range_string = f"A{row}:{_LAST_COLUMN_LETTERS}{row}"
        else:
            letters = _get_column_letter(index + 1)
            range_string = f"{letters}1:{letters}{_MAX_SHEET_ROW}"
        rule = _create_color_scale_rule(low=low, middle=middle, high=high)
        ws.conditional_formatting.add(range_string, rule)

    def add_comment(self, label: str, text: str, author: str | None = None) -> None:
        """Attach a text annotation to a cell."""
        resolved = author if author is not None else self._comment_author
        self._ws()[label].comment = _create_comment(text, resolved)
        self._grow(*parse_cell(label))

    def auto_fit(self) -> None:
        """Size the columns of every sheet to their content.

        Columns are discovered from the first row and stop at the first
        empty cell, matching how headers are laid out.
        """
        wb = self._wb()
        previous = self._selected
        for name in wb.sheetnames:
            self._selected = name
            ws = wb[name]
            max_row, _ = self._extent()
            column = 0
            while self.has_value(cell(column, 0)):
                width = 0
                for row in range(max_row):
                    width = max(width, len(self.get_string(cell(column, row))))
                fitted = min(max(width + _WIDTH_PADDING, _MIN_WIDTH), _MAX_WIDTH)
                ws.column_dimensions[_get_column_letter(column + 1)].width = float(fitted)
                column += 1
        self._selected = previous

    # -- lifecycle ---------------------------------------------------------

    def save(self) -> None:
        """Write the workbook to its path.

        The file format requires at least one sheet; an empty default sheet
        is added to a workbook that has none.
        """
        wb = self._wb()
        if not wb.sheetnames:
            wb.create_sheet(title=DEFAULT_SHEET_NAME)

        names = wb.sheetnames
        active_index = names.index(self._active_name) if self._active_name in names else 0
        wb.active = active_index
        for position, name in enumerate(names):
            wb[name].sheet_view.tabSelected = position == active_index

        self._path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(self._path)
        _logger.debug("Saved workbook", extra={"path": str(self._path)})

    def close(self) -> None:
        """Release the workbook without saving. Calling twice is a no-op."""
        if self._workbook is None:
            return
        self._workbook.close()
        self._workbook = None
        self._selected = None
        self._extents.clear()


__all__ = [
    "DEFAULT_SHEET_NAME",
    "SpreadsheetDocument",
    "cell_to_string",
]
