"""Validation helpers for plane geometry."""

from __future__ import annotations

from numbers import Integral


def _as_int(value: object, name: str) -> int:
    if not isinstance(value, Integral) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


def check_region(
    x: int,
    y: int,
    width: int,
    height: int,
    *,
    size_x: int,
    size_y: int,
) -> tuple[int, int, int, int]:
    """Validate a rectangular region against plane bounds and return it as ints."""

    x, y = _as_int(x, "x"), _as_int(y, "y")
    width, height = _as_int(width, "width"), _as_int(height, "height")

    if x < 0 or y < 0:
        raise ValueError(f"Region origin must be non-negative, got ({x}, {y})")
    if width <= 0 or height <= 0:
        raise ValueError(f"Region size must be positive, got {width}x{height}")
    if x + width > size_x or y + height > size_y:
        raise ValueError(
            f"Region x={x} y={y} w={width} h={height} exceeds plane size {size_x}x{size_y}"
        )
    return x, y, width, height


def check_dimension_order(order: str) -> str:
    """Validate a dimension order such as ``XYCZT`` and return it upper-cased."""

    text = str(order).upper()
    if len(text) != 5 or not text.startswith("XY") or sorted(text[2:]) != ["C", "T", "Z"]:
        raise ValueError(
            f"Invalid dimension order {order!r}: expected 'XY' followed by a permutation of 'ZCT'"
        )
    return text
