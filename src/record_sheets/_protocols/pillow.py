"""Protocol definitions for the Pillow color parser.

Only PIL.ImageColor.getrgb is used: it resolves CSS/HTML color names and
the #rgb, #rrggbb, rgb() and hsl() notations to channel tuples.
"""

from __future__ import annotations

from typing import Protocol


class _GetRgbFn(Protocol):
    """Protocol for PIL.ImageColor.getrgb function."""

    def __call__(self, color: str) -> tuple[int, int, int] | tuple[int, int, int, int]: ...


def _get_rgb(color: str) -> tuple[int, int, int] | tuple[int, int, int, int]:
    """Resolve a color specifier to (r, g, b) or (r, g, b, a).

    Args:
        color: Color name or CSS color notation.

    Returns:
        Channel values in 0-255.

    Raises:
        ValueError: If Pillow does not recognize the specifier.
    """
    color_mod = __import__("PIL.ImageColor", fromlist=["getrgb"])
    fn: _GetRgbFn = color_mod.getrgb
    return fn(color)


__all__ = [
    "_get_rgb",
]
