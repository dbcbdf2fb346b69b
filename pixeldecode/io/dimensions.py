"""Mapping between linear plane indices and (Z, C, T) coordinates.

A dimension order such as ``XYCZT`` lists axes fastest first, so in
``XYCZT`` consecutive plane indices step through channels before Z slices.
"""

from __future__ import annotations

from ..utils.param_check import check_dimension_order


def _axis_sizes(size_z: int, size_c: int, size_t: int) -> dict[str, int]:
    sizes = {"Z": int(size_z), "C": int(size_c), "T": int(size_t)}
    for axis, size in sizes.items():
        if size < 1:
            raise ValueError(f"size_{axis.lower()} must be >= 1, got {size}")
    return sizes


def plane_index(order: str, size_z: int, size_c: int, size_t: int, z: int, c: int, t: int) -> int:
    """Return the linear index of plane ``(z, c, t)`` under ``order``."""

    axes = check_dimension_order(order)[2:]
    sizes = _axis_sizes(size_z, size_c, size_t)
    coords = {"Z": int(z), "C": int(c), "T": int(t)}
    for axis in axes:
        if not 0 <= coords[axis] < sizes[axis]:
            raise IndexError(
                f"{axis} coordinate {coords[axis]} out of range for size {sizes[axis]}"
            )

    index = 0
    stride = 1
    for axis in axes:
        index += coords[axis] * stride
        stride *= sizes[axis]
    return index


def plane_coords(order: str, size_z: int, size_c: int, size_t: int, index: int) -> tuple[int, int, int]:
    """Return ``(z, c, t)`` for linear plane ``index`` under ``order``."""

    axes = check_dimension_order(order)[2:]
    sizes = _axis_sizes(size_z, size_c, size_t)
    count = sizes["Z"] * sizes["C"] * sizes["T"]
    index = int(index)
    if not 0 <= index < count:
        raise IndexError(f"Plane index {index} out of range for {count} planes")

    coords = {}
    for axis in axes:
        coords[axis] = index % sizes[axis]
        index //= sizes[axis]
    return coords["Z"], coords["C"], coords["T"]
