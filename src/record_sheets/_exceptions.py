"""Exception hierarchy for record_sheets library.

All exceptions propagate without recovery. Callers handle failures explicitly.
Sheet absence and unknown-sheet deletion are reported through return values
(None / False), not exceptions.
"""

from __future__ import annotations

from typing import Literal

ConversionDirection = Literal["read", "write"]


class RecordSheetsError(Exception):
    """Base exception for record_sheets library.

    All library exceptions inherit from this base class.
    """


class DisposedError(RecordSheetsError):
    """Raised when a spreadsheet or document is used after it was closed.

    Attributes:
        path: The file path the closed instance was bound to.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Spreadsheet is disposed: {path}")


class ConversionError(RecordSheetsError):
    """Raised when a field value cannot be converted to or from cell text.

    Attributes:
        field: Name of the field being converted.
        value: The offending value (raw cell text when reading).
        cell: Cell address the value was read from or would be written to.
        direction: "read" or "write".
    """

    def __init__(
        self,
        field: str,
        value: object,
        cell: str,
        direction: ConversionDirection,
    ) -> None:
        self.field = field
        self.value = value
        self.cell = cell
        self.direction = direction
        if direction == "write":
            message = (
                f"Could not convert value of field '{field}' to text. "
                f"The value would have been written to cell '{cell}'"
            )
        else:
            message = (
                f"Could not set value {value!r} to field '{field}'. "
                f"The value was read in cell '{cell}'"
            )
        super().__init__(message)


class SchemaError(RecordSheetsError):
    """Raised when a record type cannot be described as a sheet schema.

    Attributes:
        record_type: Name of the offending record type.
        message: Description of the problem.
    """

    def __init__(self, record_type: str, message: str) -> None:
        self.record_type = record_type
        self.message = message
        super().__init__(f"{message}: {record_type}")


__all__ = [
    "ConversionDirection",
    "ConversionError",
    "DisposedError",
    "RecordSheetsError",
    "SchemaError",
]
