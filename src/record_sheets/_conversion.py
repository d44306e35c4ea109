"""Invariant text conversion of field values.

Values are rendered to cell text without any locale: floats use the shortest
round-trip repr, decimals keep their exponent form, dates are ISO 8601.
Decoding reverses this and raises ValueError for text that does not fit
the target type; callers wrap that into ConversionError with cell context.
"""

from __future__ import annotations

import datetime
import enum
from decimal import Decimal, InvalidOperation

_TRUE_WORDS = frozenset({"true", "1"})
_FALSE_WORDS = frozenset({"false", "0"})


def to_text(value: object) -> str | None:
    """Render a field value as cell text.

    Args:
        value: Field value read from a record.

    Returns:
        Invariant text, or None for a None value (empty cell).
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    return str(value)


def parse_number(text: str) -> int | Decimal:
    """Parse invariant number text for a numeric cell.

    Args:
        text: Text such as "42", "-0.5" or "1E+3".

    Returns:
        int for plain integers, Decimal otherwise.

    Raises:
        ValueError: If the text is not a finite number.
    """
    stripped = text.strip()
    try:
        number = Decimal(stripped)
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {text!r}") from exc
    if not number.is_finite():
        raise ValueError(f"Not a finite number: {text!r}")
    if stripped.lstrip("+-").isdigit():
        return int(stripped)
    return number


def _to_int(text: str) -> int:
    number = parse_number(text)
    if isinstance(number, int):
        return number
    if number != number.to_integral_value():
        raise ValueError(f"Not an integer: {text!r}")
    return int(number)


def _to_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"Not a boolean: {text!r}")


def _to_date(text: str) -> datetime.date:
    stripped = text.strip()
    if "T" in stripped or " " in stripped:
        return datetime.datetime.fromisoformat(stripped).date()
    return datetime.date.fromisoformat(stripped)


def from_text(text: str, value_type: type, optional: bool) -> object:
    """Convert cell text to a field's type.

    Args:
        text: String representation of the cell ("" when empty).
        value_type: Target Python type.
        optional: Whether an empty cell may become None.

    Returns:
        Value of `value_type`, or None for an empty optional cell.

    Raises:
        ValueError: If the text cannot be converted.
    """
    if text == "":
        if optional:
            return None
        if issubclass(value_type, str):
            return ""
        raise ValueError(f"Empty cell for {value_type.__name__}")

    if issubclass(value_type, str):
        return text
    if issubclass(value_type, bool):
        return _to_bool(text)
    if issubclass(value_type, enum.Enum):
        try:
            return value_type[text.strip()]
        except KeyError as exc:
            raise ValueError(f"Not a {value_type.__name__} member: {text!r}") from exc
    if issubclass(value_type, int):
        return value_type(_to_int(text))
    if issubclass(value_type, float):
        return value_type(text.strip())
    if issubclass(value_type, Decimal):
        try:
            return value_type(text.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a decimal: {text!r}") from exc
    if issubclass(value_type, datetime.datetime):
        return value_type.fromisoformat(text.strip())
    if issubclass(value_type, datetime.date):
        return _to_date(text)
    if issubclass(value_type, datetime.time):
        return value_type.fromisoformat(text.strip())
    return value_type(text)


__all__ = [
    "from_text",
    "parse_number",
    "to_text",
]
