"""Common type definitions for record_sheets library.

Provides the primitive cell value type and the literal tags shared by the
codec, schema, and reader/writer modules.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Literal

# Cell value as stored by openpyxl (primitives only)
CellValue = str | int | float | Decimal | bool | datetime.datetime | datetime.date | None

# Layout direction: records down rows ("horizontal") or across columns ("vertical")
Flow = Literal["horizontal", "vertical"]

# Semantic kind of a field, decides how the value is written to a cell
ValueKind = Literal["text", "number", "other"]

DEFAULT_FLOW: Flow = "horizontal"


__all__ = [
    "DEFAULT_FLOW",
    "CellValue",
    "Flow",
    "ValueKind",
]
