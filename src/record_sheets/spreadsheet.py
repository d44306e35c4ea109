"""Typed records to and from spreadsheet sheets.

Each record type maps to a named sheet. Row 0 holds the field names as
column headers; every following row holds one record (under the vertical
layout the axes are swapped: column A holds the headers and each further
column one record).

    with Spreadsheet("Company.xlsx") as spreadsheet:
        spreadsheet.write(employees)
        employees = spreadsheet.read(Employee)

All methods raise exceptions on failure - no recovery or fallbacks. Reading
a sheet that does not exist returns None; deleting one returns False.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from types import TracebackType
from typing import TypeVar

from record_sheets._conversion import from_text, parse_number, to_text
from record_sheets._exceptions import ConversionError, DisposedError, SchemaError
from record_sheets._logging import get_logger
from record_sheets.config import SpreadsheetSettings, load_settings
from record_sheets.decorations import apply_decorations
from record_sheets.document import SpreadsheetDocument
from record_sheets.grid import cell
from record_sheets.schema import FieldSpec, RecordSchema, fields_for_read, fields_for_write, schema_for
from record_sheets.types.common import Flow

T = TypeVar("T")

_logger = get_logger(__name__)

# A double-quoted string literal (kept verbatim)
_STRING_LITERAL = r'"(?:[^"]|"")*"'


@functools.lru_cache(maxsize=64)
def _formula_pattern(names: tuple[str, ...]) -> re.Pattern[str]:
    """Match string literals or any of `names` not glued to a word character.

    Longer names come first so "Unit Price" wins over "Unit".
    """
    ordered = sorted(names, key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in ordered)
    return re.compile(rf"{_STRING_LITERAL}|(?<!\w)(?:{alternatives})(?!\w)")


def rewrite_formula(formula: str, addresses: Mapping[str, str]) -> str:
    """Replace field names in a formula with their cell addresses.

    Only whole names are replaced (Unicode word boundaries), so "Price"
    inside "TotalPrice" and "e" inside "größe" are left alone. Names may
    contain spaces. Text inside string literals is never touched.

    Args:
        formula: Formula text starting with "=".
        addresses: Field name -> cell label on the record's own row.

    Returns:
        The rewritten formula.
    """
    names = tuple(name for name in addresses if name != "")
    if not names:
        return formula

    def substitute(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith('"'):
            return token
        return addresses[token]

    return _formula_pattern(names).sub(substitute, formula)


class Spreadsheet:
    """Reads and writes collections of records in an xlsx file.

    Opens the file at `path` (or starts a new workbook) on construction and
    saves it on close(). Use it as a context manager so the file is always
    saved and released. Not safe for concurrent use.
    """

    def __init__(
        self,
        path: str | Path,
        settings: SpreadsheetSettings | None = None,
    ) -> None:
        """Create or open an xlsx spreadsheet.

        Args:
            path: Path to the file. It is created on close() if missing.
            settings: Probe limits and presentation options; loaded from the
                environment when None.
        """
        self._path = Path(path)
        self._settings = settings if settings is not None else load_settings()
        self._document: SpreadsheetDocument | None = SpreadsheetDocument.open(
            self._path, comment_author=self._settings["comment_author"]
        )
        self._startup_sheet: str | None = None

    def __enter__(self) -> Spreadsheet:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._document is None

    @property
    def document(self) -> SpreadsheetDocument:
        """The underlying document facade.

        Raises:
            DisposedError: If the spreadsheet is closed.
        """
        if self._document is None:
            raise DisposedError(str(self._path))
        return self._document

    # -- public operations -------------------------------------------------

    def write(
        self,
        records: Iterable[T],
        record_type: type[T] | None = None,
        *,
        sheet_name: str | None = None,
        flow: Flow | None = None,
    ) -> None:
        """Create or replace the sheet of a record type with `records`.

        Args:
            records: Records to write, one per row.
            record_type: Type describing the columns; defaults to the type of
                the first record.
            sheet_name: Sheet to write; defaults to the schema's sheet name.
            flow: Layout direction for this call; defaults to the schema's.

        Raises:
            SchemaError: If the record type cannot be determined or described.
            ConversionError: If a value cannot be rendered for its cell. Cells
                written before the failure stay written.
            DisposedError: If the spreadsheet is closed.
        """
        rows = list(records)
        schema = self._resolve_schema(rows, record_type)
        name = sheet_name if sheet_name is not None else schema.name
        direction: Flow = flow if flow is not None else schema.flow

        document = self.document
        document.clear_sheet(name)

        fields = fields_for_write(schema, name)
        _write_data(document, fields, rows, direction)
        apply_decorations(document, fields, direction)

        _logger.debug(
            "Wrote sheet",
            extra={"sheet": name, "records": len(rows), "columns": len(fields)},
        )

    def read(
        self,
        record_type: type[T],
        *,
        sheet_name: str | None = None,
        flow: Flow | None = None,
    ) -> list[T] | None:
        """Read the sheet of a record type back into new records.

        Columns are matched to fields by header label; unknown headers are
        ignored and fields without a column keep their defaults.

        Args:
            record_type: Type to construct.
            sheet_name: Sheet to read; defaults to the schema's sheet name.
            flow: Layout direction for this call; defaults to the schema's.

        Returns:
            Records in row order, or None if the sheet does not exist.

        Raises:
            ConversionError: If a cell cannot be converted to its field type.
            SchemaError: If a record cannot be constructed.
            DisposedError: If the spreadsheet is closed.
        """
        schema = schema_for(record_type)
        name = sheet_name if sheet_name is not None else schema.name
        direction: Flow = flow if flow is not None else schema.flow

        document = self.document
        if not document.select_sheet(name):
            _logger.debug("Sheet not found", extra={"sheet": name})
            return None

        header = self._read_header(document, direction)
        mapping = fields_for_read(schema, name, header)
        row_count = self._count_rows(document, len(header), direction)

        records: list[T] = []
        for row in range(1, row_count):
            values: dict[str, object] = {}
            for spec, column in mapping:
                if not spec.writable:
                    continue
                values[spec.name] = _decode_cell(document, spec, column, row, direction)
            records.append(schema.build(values))

        _logger.debug("Read sheet", extra={"sheet": name, "records": len(records)})
        return records

    def read_columns(
        self,
        record_type: type[T],
        *field_names: str,
        sheet_name: str | None = None,
        flow: Flow | None = None,
    ) -> list[tuple[object, ...]] | None:
        """Read selected fields of a record type's sheet as tuples.

        Args:
            record_type: Type whose schema types the columns.
            *field_names: Fields to read, in tuple order.
            sheet_name: Sheet to read; defaults to the schema's sheet name.
            flow: Layout direction for this call; defaults to the schema's.

        Returns:
            One tuple per data row, or None if the sheet does not exist. A
            requested field with no column yields None in its position.

        Raises:
            SchemaError: If a name is not a field of the record type.
            ConversionError: If a cell cannot be converted to its field type.
            DisposedError: If the spreadsheet is closed.
        """
        schema = schema_for(record_type)
        for field_name in field_names:
            if schema.field(field_name) is None:
                raise SchemaError(record_type.__name__, f"Unknown field '{field_name}'")

        name = sheet_name if sheet_name is not None else schema.name
        direction: Flow = flow if flow is not None else schema.flow

        document = self.document
        if not document.select_sheet(name):
            return None

        header = self._read_header(document, direction)
        columns = {spec.name: (spec, column) for spec, column in fields_for_read(schema, name, header)}
        row_count = self._count_rows(document, len(header), direction)

        result: list[tuple[object, ...]] = []
        for row in range(1, row_count):
            item: list[object] = []
            for field_name in field_names:
                mapped = columns.get(field_name)
                if mapped is None:
                    item.append(None)
                    continue
                spec, column = mapped
                item.append(_decode_cell(document, spec, column, row, direction))
            result.append(tuple(item))
        return result

    def delete(self, target: type | str) -> bool:
        """Delete the sheet of a record type, or a sheet by name.

        Returns:
            True if a sheet was deleted, False if there was none.

        Raises:
            DisposedError: If the spreadsheet is closed.
        """
        name = target if isinstance(target, str) else schema_for(target).name
        deleted = self.document.delete_sheet(name)
        _logger.debug("Deleted sheet" if deleted else "No sheet to delete", extra={"sheet": name})
        return deleted

    def set_startup_sheet(self, target: type | str) -> None:
        """Set the sheet selected when the file is next opened.

        Raises:
            DisposedError: If the spreadsheet is closed.
        """
        name = target if isinstance(target, str) else schema_for(target).name
        _ = self.document
        self._startup_sheet = name

    def sheet_names(self) -> list[str]:
        return self.document.sheet_names()

    def close(self) -> None:
        """Auto-fit, save, and release the file. A second call does nothing."""
        document = self._document
        if document is None:
            return
        try:
            if self._settings["auto_fit"]:
                document.auto_fit()
            if self._startup_sheet is not None:
                document.set_active(self._startup_sheet)
            document.save()
        finally:
            document.close()
            self._document = None
        _logger.debug("Closed spreadsheet", extra={"path": str(self._path)})

    # -- helpers -----------------------------------------------------------

    def _resolve_schema(self, rows: Sequence[T], record_type: type[T] | None) -> RecordSchema[T]:
        if record_type is not None:
            return schema_for(record_type)
        if not rows:
            raise SchemaError("<unknown>", "Cannot infer the record type of an empty collection")
        inferred: type[T] = type(rows[0])
        return schema_for(inferred)

    def _read_header(self, document: SpreadsheetDocument, flow: Flow) -> list[str]:
        """Header labels left to right, up to the first empty one."""
        header: list[str] = []
        for column in range(self._settings["max_columns"]):
            label = document.get_string(cell(column, 0, flow))
            if label == "":
                break
            header.append(label)
        return header

    def _count_rows(self, document: SpreadsheetDocument, column_count: int, flow: Flow) -> int:
        """Number of rows including the header, up to the first blank row."""
        if column_count == 0:
            return 0
        for row in range(self._settings["max_rows"]):
            if not any(document.has_value(cell(column, row, flow)) for column in range(column_count)):
                return row
        return self._settings["max_rows"]


def _write_data(
    document: SpreadsheetDocument,
    fields: Sequence[FieldSpec],
    rows: Sequence[T],
    flow: Flow,
) -> None:
    for column, spec in enumerate(fields):
        document.set_string(cell(column, 0, flow), spec.name)

    for index, record in enumerate(rows):
        row = index + 1
        for column, spec in enumerate(fields):
            label = cell(column, row, flow)
            value: object = None
            try:
                value = spec.getter(record)
                text = to_text(value)
            except (AttributeError, TypeError, ValueError) as exc:
                raise ConversionError(spec.name, value, label, "write") from exc

            if text is None:
                continue

            if spec.kind == "number":
                try:
                    number = parse_number(text)
                except ValueError as exc:
                    raise ConversionError(spec.name, value, label, "write") from exc
                document.set_numeric(label, number)
            elif spec.kind == "text" and text.startswith("="):
                addresses = {other.name: cell(i, row, flow) for i, other in enumerate(fields)}
                document.set_string(label, rewrite_formula(text, addresses))
            else:
                document.set_string(label, text)


def _decode_cell(
    document: SpreadsheetDocument,
    spec: FieldSpec,
    column: int,
    row: int,
    flow: Flow,
) -> object:
    label = cell(column, row, flow)
    raw = document.get_string(label)
    try:
        return from_text(raw, spec.value_type, spec.optional)
    except (TypeError, ValueError) as exc:
        raise ConversionError(spec.name, raw, label, "read") from exc


__all__ = [
    "Spreadsheet",
    "rewrite_formula",
]
