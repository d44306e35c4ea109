"""Spreadsheet-style cell addressing.

Converts zero-based (column, row) pairs to labels such as "A1" or "AJO951"
and back. Column letters are a bijective base-26 numeral: there is no zero
digit, so index 26 is "AA" rather than "BA".

Under the "vertical" flow records run across columns and fields down rows,
so the two axes are swapped before encoding.
"""

from __future__ import annotations

import re

from record_sheets.types.common import DEFAULT_FLOW, Flow

_RANGE = ord("Z") - ord("A") + 1
_LABEL_RE = re.compile(r"^([A-Z]+)([1-9][0-9]*)$")


def column_label(index: int) -> str:
    """Return the letter part of a cell label for a zero-based column.

    Args:
        index: Zero-based column index.

    Returns:
        Column letters (0 -> "A", 25 -> "Z", 26 -> "AA").

    Raises:
        ValueError: If index is negative.
    """
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")

    letters = ""
    while index >= 0:
        letters = chr(ord("A") + index % _RANGE) + letters
        index = index // _RANGE - 1
    return letters


def column_index(letters: str) -> int:
    """Return the zero-based column index for column letters.

    Args:
        letters: Upper-case column letters such as "A" or "AJO".

    Returns:
        Zero-based column index.

    Raises:
        ValueError: If letters is empty or contains anything but A-Z.
    """
    if letters == "" or not letters.isascii() or not letters.isalpha() or not letters.isupper():
        raise ValueError(f"Invalid column letters: {letters!r}")

    index = 0
    for char in letters:
        index = index * _RANGE + (ord(char) - ord("A") + 1)
    return index - 1


def cell(column: int, row: int, flow: Flow = DEFAULT_FLOW) -> str:
    """Return the label of the cell at a zero-based (column, row) position.

    Args:
        column: Zero-based logical column (field index under horizontal flow).
        row: Zero-based logical row (0 is the header line).
        flow: Layout direction. "vertical" swaps the axes before encoding.

    Returns:
        Cell label such as "A1".

    Raises:
        ValueError: If either index is negative.
    """
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    if column < 0:
        raise ValueError(f"Column index must be non-negative, got {column}")

    if flow == "vertical":
        column, row = row, column

    return f"{column_label(column)}{row + 1}"


def parse_cell(label: str, flow: Flow = DEFAULT_FLOW) -> tuple[int, int]:
    """Return the zero-based (column, row) position of a cell label.

    Inverse of cell(): parse_cell(cell(x, y, flow), flow) == (x, y).

    Args:
        label: Cell label such as "B7". Absolute markers ("$B$7") are accepted.
        flow: Layout direction the position is expressed in.

    Returns:
        Tuple of (column, row).

    Raises:
        ValueError: If the label is malformed.
    """
    match = _LABEL_RE.match(label.replace("$", "").upper())
    if match is None:
        raise ValueError(f"Invalid cell label: {label!r}")

    column = column_index(match.group(1))
    row = int(match.group(2)) - 1

    if flow == "vertical":
        return row, column
    return column, row


__all__ = [
    "cell",
    "column_index",
    "column_label",
    "parse_cell",
]
