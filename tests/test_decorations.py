"""Tests for decorations module."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import Workbook

from record_sheets._protocols.openpyxl import WorkbookProtocol
from record_sheets.config import SpreadsheetSettings
from record_sheets.decorations import ColorScale, Format, Hidden, Layout, Tooltip, to_argb
from record_sheets.schema import column, decorated, sheet_record
from record_sheets.spreadsheet import Spreadsheet
from record_sheets.testing import hooks


@dataclass
class Sale:
    region: str = column(Tooltip("Sales region", author="finance"))
    amount: Decimal = column(Format("#,##0.00"), default=Decimal(0))
    score: int = column(ColorScale("red", "green", middle="yellow"), default=0)

    @property
    @decorated(Tooltip("Amount with tax"))
    def gross(self) -> Decimal:
        return self.amount * Decimal("1.2")


@sheet_record(Layout("vertical"))
@dataclass
class Metric:
    key: str = ""
    value: float = column(Format("0.0%"), default=0.0)


def _capture_workbook() -> Workbook:
    workbook = Workbook()

    def _create() -> WorkbookProtocol:
        return workbook

    hooks.create_workbook = _create
    return workbook


def test_to_argb() -> None:
    assert to_argb("#ff0000") == "FFFF0000"
    assert to_argb("00ff00") == "FF00FF00"
    assert to_argb("#80112233") == "80112233"
    assert to_argb("Red") == "FFFF0000"
    assert to_argb(" white ") == "FFFFFFFF"
    for bad in ("", "#12345", "notacolor", "#GGGGGG"):
        with pytest.raises(ValueError):
            to_argb(bad)


def test_to_argb_resolves_html_names() -> None:
    assert to_argb("Coral") == "FFFF7F50"
    assert to_argb("navy") == "FF000080"
    assert to_argb("Salmon") == "FFFA8072"
    assert to_argb("SteelBlue") == "FF4682B4"
    assert to_argb("TOMATO") == "FFFF6347"
    assert to_argb("rgb(1, 2, 3)") == "FF010203"


def test_color_scale_accepts_html_names() -> None:
    for name in ("Coral", "Navy", "Salmon", "SteelBlue", "Tomato"):
        scale = ColorScale(name, "White")
        assert scale.low == name


def test_color_scale_validates_colors() -> None:
    assert ColorScale("red", "green").middle == "#FFFFFF"
    with pytest.raises(ValueError):
        ColorScale("red", "nope")


def test_layout_validates_flow() -> None:
    assert Layout("vertical").flow == "vertical"
    with pytest.raises(ValueError):
        Layout("diagonal")  # type: ignore[arg-type]


def test_hidden_sheet_selection() -> None:
    everywhere = Hidden()
    some = Hidden("Archive", "Public")
    assert everywhere.hides("Anything")
    assert some.hides("Archive")
    assert not some.hides("Sales")
    assert some == Hidden("Archive", "Public")


def test_decorations_applied_on_write(workbook_path: Path, settings: SpreadsheetSettings) -> None:
    workbook = _capture_workbook()
    sales = [
        Sale(region="North", amount=Decimal("1500.5"), score=3),
        Sale(region="South", amount=Decimal("20"), score=9),
    ]
    with Spreadsheet(workbook_path, settings) as spreadsheet:
        spreadsheet.write(sales)
        sheet = workbook["Sale"]

        assert sheet.column_dimensions["B"].number_format == "#,##0.00"
        assert sheet["B2"].number_format == "#,##0.00"
        assert sheet["B3"].number_format == "#,##0.00"
        assert sheet["A2"].number_format == "General"

        assert sheet["A1"].comment is not None
        assert sheet["A1"].comment.text == "Sales region"
        assert sheet["A1"].comment.author == "finance"
        assert sheet["D1"].comment is not None
        assert sheet["D1"].comment.author == settings["comment_author"]

        formats = list(sheet.conditional_formatting)
        assert len(formats) == 1
        assert str(formats[0].sqref) == "C1:C1048576"
        rule = formats[0].rules[0]
        assert rule.type == "colorScale"
        assert [color.rgb for color in rule.colorScale.color] == ["FFFF0000", "FFFFFF00", "FF008000"]

        # Decorations are presentation only
        assert spreadsheet.read(Sale) == sales


def test_decorations_follow_vertical_layout(workbook_path: Path, settings: SpreadsheetSettings) -> None:
    workbook = _capture_workbook()
    with Spreadsheet(workbook_path, settings) as spreadsheet:
        spreadsheet.write([Metric(key="uptime", value=0.995)])
        sheet = workbook["Metric"]
        assert sheet.row_dimensions[2].number_format == "0.0%"
        assert sheet["B2"].number_format == "0.0%"
        assert sheet["B1"].number_format == "General"
        assert spreadsheet.read(Metric) == [Metric(key="uptime", value=0.995)]
