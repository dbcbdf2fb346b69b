"""Min-max normalization of raw pixel buffers into ``[0, 1]``."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from .decode import read_samples
from .errors import UnsupportedWidth
from .pixel_type import PixelTypeDescriptor, default_min_max, pixel_type_from_dtype

logger = logging.getLogger(__name__)


def integer_range(descriptor: PixelTypeDescriptor) -> tuple[int, int]:
    """Return the ``(min, max)`` an integer source is normalized against.

    Unsigned data with fewer significant bits than its storage width (12-bit
    samples in 16-bit words, say) uses ``2**true_bit_depth - 1`` as its max;
    a 1-bit ``bit`` plane therefore spans ``[0, 1]``.
    """

    if descriptor.floating_point:
        raise ValueError("integer_range() is undefined for floating-point pixels")
    if not descriptor.signed and descriptor.bytes_per_pixel == 8:
        raise UnsupportedWidth("Unsigned 64-bit integer pixels are not supported")

    if descriptor.bytes_per_pixel == 8:
        # no named pixel type for signed 64-bit integers
        info = np.iinfo(np.int64)
        range_min, range_max = int(info.min), int(info.max)
    else:
        range_min, range_max = default_min_max(pixel_type_from_dtype(descriptor.dtype))
    if not descriptor.signed and descriptor.true_bit_depth < descriptor.bits:
        range_max = 2 ** descriptor.true_bit_depth - 1
    return range_min, range_max


def _normalize_floating_point(samples: np.ndarray) -> np.ndarray:
    data = samples.astype(np.float64)

    finite = np.isfinite(data)
    if finite.any():
        lo = float(data[finite].min())
        hi = float(data[finite].max())
    else:
        lo = hi = 0.0
    span = hi - lo

    if span > 0:
        out = (data - lo) / span
    else:
        # single-valued or empty range
        out = np.where(np.isnan(data), np.nan, 0.0)

    out[data == np.inf] = 1.0
    out[data == -np.inf] = 0.0
    logger.debug("Float normalization over %d samples: min=%r, max=%r", data.size, lo, hi)
    return out


def _normalize_integer(samples: np.ndarray, descriptor: PixelTypeDescriptor) -> np.ndarray:
    range_min, range_max = integer_range(descriptor)
    data = samples.astype(np.int64).astype(np.float64)
    out = (data - float(range_min)) / float(range_max - range_min)
    logger.debug(
        "Integer normalization over %d samples: range=[%d, %d]", data.size, range_min, range_max
    )
    return out


def normalize(buffer: Any, descriptor: PixelTypeDescriptor) -> np.ndarray:
    """Scale the samples of ``buffer`` into ``[0, 1]`` as ``float64``.

    Floating-point data is scaled between its own finite min and max;
    ``+inf`` maps to 1.0 and ``-inf`` to 0.0, NaN stays NaN. When the finite
    samples are all equal (or there are none) they map to 0.0.

    Integer data is scaled between the nominal range of its type, see
    :func:`integer_range`. Samples above a truncated bit depth range are not
    clamped.
    """

    if descriptor.floating_point:
        if descriptor.bytes_per_pixel not in (4, 8):
            raise UnsupportedWidth(
                f"Cannot normalize {descriptor.bytes_per_pixel}-byte floating-point pixels"
            )
        return _normalize_floating_point(read_samples(buffer, descriptor))

    return _normalize_integer(read_samples(buffer, descriptor), descriptor)


def normalize_bytes(
    buffer: Any,
    *,
    bytes_per_pixel: int,
    floating_point: bool,
    little_endian: bool,
    true_bit_depth: int | None = None,
    unsigned_source: bool = False,
) -> np.ndarray:
    descriptor = PixelTypeDescriptor(
        bytes_per_pixel=bytes_per_pixel,
        signed=not unsigned_source,
        floating_point=floating_point,
        true_bit_depth=true_bit_depth,
        little_endian=little_endian,
    )
    return normalize(buffer, descriptor)
