"""Output representation chosen for each source pixel encoding.

Every source encoding is promoted to a numeric type that holds all of its
values exactly. Signed 32-bit integers are never handed out as ``int32``:
hosts such as R reserve ``-2**31`` as their missing-value marker, so those
samples go out as ``float64`` instead.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from .errors import UnsupportedWidth
from .pixel_type import PixelTypeDescriptor


class OutputRepresentation(str, Enum):
    INT8_BYTES = "int8_bytes"
    WIDENED_SHORT = "widened_short"
    FLOAT32 = "float32"
    WIDENED_INT32_AS_DOUBLE = "widened_int32_as_double"
    FLOAT64 = "float64"
    WIDENED_INT64 = "widened_int64"

    @property
    def dtype(self) -> np.dtype:
        return REPRESENTATION_DTYPES[self]


REPRESENTATION_DTYPES = {
    OutputRepresentation.INT8_BYTES: np.dtype(np.int8),
    OutputRepresentation.WIDENED_SHORT: np.dtype(np.int16),
    OutputRepresentation.FLOAT32: np.dtype(np.float32),
    OutputRepresentation.WIDENED_INT32_AS_DOUBLE: np.dtype(np.float64),
    OutputRepresentation.FLOAT64: np.dtype(np.float64),
    OutputRepresentation.WIDENED_INT64: np.dtype(np.int64),
}


def select_representation(descriptor: PixelTypeDescriptor) -> OutputRepresentation:
    """Pick the output representation for ``descriptor``.

    Unsigned sources need twice their storage width to fit a signed type, so
    the table is keyed on ``descriptor.effective_width``.
    """

    width = descriptor.effective_width

    if descriptor.floating_point:
        if width == 4:
            return OutputRepresentation.FLOAT32
        if width == 8:
            return OutputRepresentation.FLOAT64
        raise UnsupportedWidth(
            f"No representation for {descriptor.bytes_per_pixel}-byte floating-point pixels"
        )

    if width == 1:
        return OutputRepresentation.INT8_BYTES
    if width == 2:
        # uint8, int16
        return OutputRepresentation.WIDENED_SHORT
    if width == 4:
        # uint16, int32
        return OutputRepresentation.WIDENED_INT32_AS_DOUBLE
    if width == 8:
        # uint32, int64
        return OutputRepresentation.WIDENED_INT64

    raise UnsupportedWidth(
        f"No representation for {descriptor.bytes_per_pixel}-byte "
        f"{'signed' if descriptor.signed else 'unsigned'} integer pixels"
    )
