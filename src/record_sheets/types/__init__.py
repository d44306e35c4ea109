"""Shared type definitions for record_sheets."""

from __future__ import annotations

from record_sheets.types.common import DEFAULT_FLOW, CellValue, Flow, ValueKind

__all__ = [
    "DEFAULT_FLOW",
    "CellValue",
    "Flow",
    "ValueKind",
]
