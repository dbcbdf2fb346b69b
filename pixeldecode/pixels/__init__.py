"""Pixel buffer decoding.

Raw plane bytes are turned into numpy arrays in one of a closed set of
output representations (see :class:`OutputRepresentation`), or scaled into
``[0, 1]`` as ``float64``. Every function here is pure: all descriptor fields
are passed explicitly and no state is kept between calls.
"""

from __future__ import annotations

from .decode import DecodedPlane, decode_raw, decode_raw_bytes
from .errors import DecodeError, PixelDecodeError, UnsupportedWidth
from .normalize import integer_range, normalize, normalize_bytes
from .pixel_type import (
    PixelType,
    PixelTypeDescriptor,
    bytes_per_pixel,
    default_bits_per_pixel,
    default_min_max,
    is_floating_point,
    is_signed,
    parse_pixel_type,
    pixel_type_from_dtype,
)
from .promotion import OutputRepresentation, select_representation

__all__ = [
    "DecodeError",
    "DecodedPlane",
    "OutputRepresentation",
    "PixelDecodeError",
    "PixelType",
    "PixelTypeDescriptor",
    "UnsupportedWidth",
    "bytes_per_pixel",
    "decode_raw",
    "decode_raw_bytes",
    "default_bits_per_pixel",
    "default_min_max",
    "integer_range",
    "is_floating_point",
    "is_signed",
    "normalize",
    "normalize_bytes",
    "parse_pixel_type",
    "pixel_type_from_dtype",
    "select_representation",
]
