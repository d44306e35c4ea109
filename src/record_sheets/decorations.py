"""Declarative column decorations.

A decoration is attached to a field (Format, ColorScale, Tooltip, Hidden) or
to a record type (Layout). Presentation decorations are applied once per
write, after the data is in place, and never change the values that are
read back. Hidden and Layout are structural: schema discovery consumes them
and their apply() does nothing.

Colors accept "#RRGGBB", "RRGGBB", "#AARRGGBB" or an HTML color name
(case-insensitive), resolved through Pillow.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from record_sheets._protocols.pillow import _get_rgb
from record_sheets.grid import cell
from record_sheets.types.common import Flow

if TYPE_CHECKING:
    from record_sheets.document import SpreadsheetDocument
    from record_sheets.schema import FieldSpec

NEUTRAL_COLOR = "#FFFFFF"

# Bare 6-digit hex and 8-digit ARGB hex; everything else goes to Pillow
_HEX_RE = re.compile(r"^#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")


def to_argb(color: str) -> str:
    """Normalize a color to the 8-digit ARGB hex string openpyxl stores.

    Args:
        color: Hex code, HTML color name ("Coral", "SteelBlue") or any other
            notation PIL.ImageColor understands.

    Returns:
        Upper-case AARRGGBB string; input without alpha gets an opaque one.

    Raises:
        ValueError: If the color is neither valid hex nor a known color.
    """
    stripped = color.strip()
    match = _HEX_RE.match(stripped)
    if match is not None:
        digits = match.group(1).upper()
        if len(digits) == 6:
            return f"FF{digits}"
        return digits

    if stripped == "":
        raise ValueError(f"Unrecognized color: {color!r}")
    try:
        channels = _get_rgb(stripped)
    except ValueError as exc:
        raise ValueError(f"Unrecognized color: {color!r}") from exc

    alpha = channels[3] if len(channels) == 4 else 255
    red, green, blue = channels[0], channels[1], channels[2]
    return f"{alpha:02X}{red:02X}{green:02X}{blue:02X}"


class Decoration(Protocol):
    """Protocol for all decoration variants."""

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        """Apply the decoration to the line of field `index` in the selected sheet."""
        ...


@dataclass(frozen=True)
class Format:
    """Number format code applied to a whole column (row under vertical flow).

    See the spreadsheet application's number format code documentation,
    e.g. "0.00", "#,##0", "0%", "yyyy-mm-dd".
    """

    code: str

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        document.set_line_format(index, self.code, flow)


@dataclass(frozen=True)
class ColorScale:
    """Three-point percentile color gradient over a whole column.

    The middle color defaults to neutral white when only two are given.
    """

    low: str
    high: str
    middle: str = NEUTRAL_COLOR

    def __post_init__(self) -> None:
        for color in (self.low, self.middle, self.high):
            to_argb(color)

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        document.add_color_scale(
            index,
            low=to_argb(self.low),
            middle=to_argb(self.middle),
            high=to_argb(self.high),
            flow=flow,
        )


@dataclass(frozen=True)
class Tooltip:
    """Text annotation anchored to the column's header cell."""

    text: str
    author: str | None = None

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        document.add_comment(cell(index, 0, flow), self.text, self.author)


@dataclass(frozen=True, init=False)
class Hidden:
    """Excludes a field from writing and reading.

    With no sheet names the field is hidden on every sheet; otherwise only on
    the named ones.
    """

    sheet_names: tuple[str, ...]

    def __init__(self, *sheet_names: str) -> None:
        object.__setattr__(self, "sheet_names", tuple(sheet_names))

    def hides(self, sheet_name: str) -> bool:
        """Return True if the field is excluded from `sheet_name`."""
        return len(self.sheet_names) == 0 or sheet_name in self.sheet_names

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        return None


@dataclass(frozen=True)
class Layout:
    """Record-type level layout direction."""

    flow: Flow

    def __post_init__(self) -> None:
        if self.flow not in ("horizontal", "vertical"):
            raise ValueError(f"Unknown layout flow: {self.flow!r}")

    def apply(self, document: SpreadsheetDocument, index: int, flow: Flow) -> None:
        return None


def apply_decorations(
    document: SpreadsheetDocument,
    fields: Sequence[FieldSpec],
    flow: Flow,
) -> None:
    """Apply every field's decorations to the currently selected sheet.

    Args:
        document: Document whose selected sheet was just written.
        fields: Fields in written column order.
        flow: Layout direction the sheet was written with.
    """
    for index, field in enumerate(fields):
        for decoration in field.decorations:
            decoration.apply(document, index, flow)


__all__ = [
    "NEUTRAL_COLOR",
    "ColorScale",
    "Decoration",
    "Format",
    "Hidden",
    "Layout",
    "Tooltip",
    "apply_decorations",
    "to_argb",
]
