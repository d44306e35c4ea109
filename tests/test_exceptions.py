"""Tests for _exceptions module."""

from __future__ import annotations

from record_sheets import ConversionError, DisposedError, RecordSheetsError, SchemaError


def test_hierarchy() -> None:
    for error_type in (ConversionError, DisposedError, SchemaError):
        assert issubclass(error_type, RecordSheetsError)
    assert issubclass(RecordSheetsError, Exception)


def test_disposed_error() -> None:
    error = DisposedError("/tmp/Company.xlsx")
    assert error.path == "/tmp/Company.xlsx"
    assert str(error) == "Spreadsheet is disposed: /tmp/Company.xlsx"


def test_conversion_error_on_write() -> None:
    error = ConversionError("price", object(), "B2", "write")
    assert error.field == "price"
    assert error.cell == "B2"
    assert error.direction == "write"
    assert str(error) == (
        "Could not convert value of field 'price' to text. The value would have been written to cell 'B2'"
    )


def test_conversion_error_on_read() -> None:
    error = ConversionError("quantity", "many", "C7", "read")
    assert error.value == "many"
    assert str(error) == "Could not set value 'many' to field 'quantity'. The value was read in cell 'C7'"


def test_schema_error() -> None:
    error = SchemaError("Employee", "Record type has no fields")
    assert error.record_type == "Employee"
    assert error.message == "Record type has no fields"
    assert str(error) == "Record type has no fields: Employee"
