"""Typed records to and from spreadsheet sheets.

This library maps collections of dataclass (or explicitly registered)
records onto named sheets of an xlsx workbook via openpyxl:
- one sheet per record type, one column per field, one row per record
- header-matched reading that tolerates reordered and extra columns
- declarative column decorations (number format, color scale, tooltip)
- per-sheet field hiding and a vertical layout option
- spreadsheet-style cell addressing ("A1", "AA12", ...)

Errors propagate as exceptions; a missing sheet reads as None.
"""

from __future__ import annotations

# Errors
from record_sheets._exceptions import (
    ConversionError,
    DisposedError,
    RecordSheetsError,
    SchemaError,
)

# Logging
from record_sheets._logging import get_logger, setup_logging

# Settings
from record_sheets.config import SpreadsheetSettings, default_settings, load_settings

# Decorations
from record_sheets.decorations import (
    ColorScale,
    Decoration,
    Format,
    Hidden,
    Layout,
    Tooltip,
)

# Document facade
from record_sheets.document import SpreadsheetDocument

# Addressing
from record_sheets.grid import cell, column_index, column_label, parse_cell

# Schemas
from record_sheets.schema import (
    FieldSpec,
    RecordSchema,
    column,
    decorated,
    fields_for_read,
    fields_for_write,
    register_schema,
    schema_for,
    sheet_record,
)

# Reader/writer
from record_sheets.spreadsheet import Spreadsheet

# Types
from record_sheets.types.common import CellValue, Flow, ValueKind

__all__ = [
    "CellValue",
    "ColorScale",
    "ConversionError",
    "Decoration",
    "DisposedError",
    "FieldSpec",
    "Flow",
    "Format",
    "Hidden",
    "Layout",
    "RecordSchema",
    "RecordSheetsError",
    "SchemaError",
    "Spreadsheet",
    "SpreadsheetDocument",
    "SpreadsheetSettings",
    "Tooltip",
    "ValueKind",
    "cell",
    "column",
    "column_index",
    "column_label",
    "decorated",
    "default_settings",
    "fields_for_read",
    "fields_for_write",
    "get_logger",
    "load_settings",
    "parse_cell",
    "register_schema",
    "schema_for",
    "setup_logging",
    "sheet_record",
]
