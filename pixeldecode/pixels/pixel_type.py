from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np

from .errors import UnsupportedWidth

SUPPORTED_WIDTHS = (1, 2, 4, 8)


class PixelType(str, Enum):
    """Pixel types reported by image readers."""

    INT8 = "int8"
    UINT8 = "uint8"
    INT16 = "int16"
    UINT16 = "uint16"
    INT32 = "int32"
    UINT32 = "uint32"
    FLOAT = "float"
    DOUBLE = "double"
    BIT = "bit"


_BYTES_PER_PIXEL = {
    PixelType.INT8: 1,
    PixelType.UINT8: 1,
    PixelType.INT16: 2,
    PixelType.UINT16: 2,
    PixelType.INT32: 4,
    PixelType.UINT32: 4,
    PixelType.FLOAT: 4,
    PixelType.DOUBLE: 8,
    PixelType.BIT: 1,
}

_SIGNED = {PixelType.INT8, PixelType.INT16, PixelType.INT32, PixelType.FLOAT, PixelType.DOUBLE}
_FLOATING_POINT = {PixelType.FLOAT, PixelType.DOUBLE}

_DTYPE_TO_PIXEL_TYPE = {
    np.dtype(np.int8): PixelType.INT8,
    np.dtype(np.uint8): PixelType.UINT8,
    np.dtype(np.int16): PixelType.INT16,
    np.dtype(np.uint16): PixelType.UINT16,
    np.dtype(np.int32): PixelType.INT32,
    np.dtype(np.uint32): PixelType.UINT32,
    np.dtype(np.float32): PixelType.FLOAT,
    np.dtype(np.float64): PixelType.DOUBLE,
    np.dtype(np.bool_): PixelType.BIT,
}


def parse_pixel_type(raw: str | PixelType) -> PixelType:
    if isinstance(raw, PixelType):
        return raw
    try:
        return PixelType(str(raw).lower())
    except Exception as exc:  # noqa: BLE001 - value validation helper
        raise ValueError(f"Unknown pixel type: {raw!r}") from exc


def bytes_per_pixel(pixel_type: str | PixelType) -> int:
    return _BYTES_PER_PIXEL[parse_pixel_type(pixel_type)]


def is_signed(pixel_type: str | PixelType) -> bool:
    return parse_pixel_type(pixel_type) in _SIGNED


def is_floating_point(pixel_type: str | PixelType) -> bool:
    return parse_pixel_type(pixel_type) in _FLOATING_POINT


def default_bits_per_pixel(pixel_type: str | PixelType) -> int:
    """Significant bits of a pixel type: 1 for ``bit``, else the storage width."""

    pt = parse_pixel_type(pixel_type)
    if pt is PixelType.BIT:
        return 1
    return _BYTES_PER_PIXEL[pt] * 8


def default_min_max(pixel_type: str | PixelType) -> tuple[float, float]:
    """Return the nominal ``(min, max)`` value range of a pixel type."""

    pt = parse_pixel_type(pixel_type)
    if pt is PixelType.BIT:
        return 0, 1
    if pt is PixelType.FLOAT:
        info = np.finfo(np.float32)
        return float(info.min), float(info.max)
    if pt is PixelType.DOUBLE:
        info = np.finfo(np.float64)
        return float(info.min), float(info.max)
    iinfo = np.iinfo(np.dtype(pt.value))
    return int(iinfo.min), int(iinfo.max)


def pixel_type_from_dtype(dtype: Any) -> PixelType:
    dt = np.dtype(dtype).newbyteorder("=")
    try:
        return _DTYPE_TO_PIXEL_TYPE[dt]
    except KeyError as exc:
        raise UnsupportedWidth(f"No pixel type for dtype {np.dtype(dtype)}") from exc


def _is_little_endian(dtype: np.dtype) -> bool:
    order = dtype.byteorder
    if order in ("=", "|"):
        return np.little_endian
    return order == "<"


@dataclass(frozen=True)
class PixelTypeDescriptor:
    """Raw encoding of one image plane.

    Parameters
    ----------
    bytes_per_pixel:
        Storage width of one sample, one of 1, 2, 4 or 8.
    signed:
        Whether integer samples are two's complement. Forced to ``True`` for
        floating-point data.
    floating_point:
        Whether samples are IEEE 754 floats.
    true_bit_depth:
        Number of significant bits per sample. Defaults to the full storage
        width; may be smaller, e.g. 12-bit data stored in 16-bit words.
    little_endian:
        Byte order of multi-byte samples.
    """

    bytes_per_pixel: int
    signed: bool = True
    floating_point: bool = False
    true_bit_depth: Optional[int] = None
    little_endian: bool = True

    def __post_init__(self) -> None:
        bpp = self.bytes_per_pixel
        if isinstance(bpp, bool) or not isinstance(bpp, (int, np.integer)):
            raise TypeError(f"bytes_per_pixel must be an int, got {type(bpp).__name__}")
        if int(bpp) not in SUPPORTED_WIDTHS:
            raise UnsupportedWidth(
                f"bytes_per_pixel must be one of {SUPPORTED_WIDTHS}, got {bpp}"
            )
        object.__setattr__(self, "bytes_per_pixel", int(bpp))
        object.__setattr__(self, "floating_point", bool(self.floating_point))
        object.__setattr__(self, "little_endian", bool(self.little_endian))
        # float samples carry their own sign bit
        object.__setattr__(self, "signed", True if self.floating_point else bool(self.signed))

        bits = self.bits
        depth = bits if self.true_bit_depth is None else int(self.true_bit_depth)
        if depth < 1 or depth > bits:
            raise ValueError(f"true_bit_depth must be in [1, {bits}], got {self.true_bit_depth}")
        object.__setattr__(self, "true_bit_depth", depth)

    @property
    def bits(self) -> int:
        return self.bytes_per_pixel * 8

    @property
    def effective_width(self) -> int:
        """Width in bytes of the narrowest signed type holding every sample."""

        if self.signed:
            return self.bytes_per_pixel
        return self.bytes_per_pixel * 2

    @property
    def dtype(self) -> np.dtype:
        """Numpy dtype of one source sample, byte order included."""

        if self.floating_point:
            if self.bytes_per_pixel not in (4, 8):
                raise UnsupportedWidth(
                    f"Floating-point samples must be 4 or 8 bytes, got {self.bytes_per_pixel}"
                )
            kind = "f"
        else:
            kind = "i" if self.signed else "u"
        order = "<" if self.little_endian else ">"
        return np.dtype(f"{order}{kind}{self.bytes_per_pixel}")

    @classmethod
    def from_pixel_type(
        cls,
        pixel_type: str | PixelType,
        *,
        little_endian: bool,
        bits_per_pixel: Optional[int] = None,
    ) -> "PixelTypeDescriptor":
        pt = parse_pixel_type(pixel_type)
        bpp = bytes_per_pixel(pt)
        depth = bits_per_pixel
        if depth is not None and (depth <= 0 or depth > bpp * 8):
            # readers report 0 or nonsense for unset bit depths
            depth = None
        if depth is None:
            depth = default_bits_per_pixel(pt)
        return cls(
            bytes_per_pixel=bpp,
            signed=is_signed(pt),
            floating_point=is_floating_point(pt),
            true_bit_depth=depth,
            little_endian=little_endian,
        )

    @classmethod
    def from_dtype(cls, dtype: Any, *, true_bit_depth: Optional[int] = None) -> "PixelTypeDescriptor":
        dt = np.dtype(dtype)
        if dt.kind == "b":
            dt = np.dtype(np.uint8)
        if dt.kind not in ("i", "u", "f"):
            raise UnsupportedWidth(f"Unsupported dtype for pixel data: {dt}")
        return cls(
            bytes_per_pixel=dt.itemsize,
            signed=dt.kind != "u",
            floating_point=dt.kind == "f",
            true_bit_depth=true_bit_depth,
            little_endian=_is_little_endian(dt),
        )
