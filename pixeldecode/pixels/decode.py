from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import DecodeError
from .pixel_type import PixelTypeDescriptor
from .promotion import OutputRepresentation, select_representation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedPlane:
    """Samples of one plane region in their promoted representation.

    ``values`` is a 1-D, native byte order array whose dtype always matches
    ``representation.dtype``.
    """

    representation: OutputRepresentation
    values: np.ndarray

    def __post_init__(self) -> None:
        if not isinstance(self.values, np.ndarray):
            raise TypeError(f"Expected np.ndarray, got {type(self.values)}")
        if self.values.ndim != 1:
            raise ValueError(f"Expected 1-D values, got shape {self.values.shape}")
        expected = self.representation.dtype
        if self.values.dtype != expected:
            raise ValueError(
                f"Expected dtype={expected} for {self.representation.value}, got {self.values.dtype}"
            )

    def __len__(self) -> int:
        return int(self.values.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.values.dtype

    def reshape(self, height: int, width: int) -> np.ndarray:
        """Return the samples as a row-major ``(height, width)`` array."""

        h, w = int(height), int(width)
        if h * w != len(self):
            raise ValueError(f"Cannot reshape {len(self)} samples into ({h}, {w})")
        return self.values.reshape(h, w)


def as_byte_array(buffer: Any) -> np.ndarray:
    """View a bytes-like buffer as a flat ``uint8`` array without copying."""

    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise TypeError(f"Expected a uint8 buffer, got dtype={buffer.dtype}")
        return np.ascontiguousarray(buffer).reshape(-1)
    if isinstance(buffer, str):
        raise TypeError("Pixel buffers must be bytes-like, got str")
    view = memoryview(buffer).cast("B")
    if view.nbytes == 0:
        return np.empty(0, dtype=np.uint8)
    return np.frombuffer(view, dtype=np.uint8)


def read_samples(buffer: Any, descriptor: PixelTypeDescriptor) -> np.ndarray:
    """Split ``buffer`` into source samples, one per ``bytes_per_pixel`` chunk."""

    raw = as_byte_array(buffer)
    bpp = descriptor.bytes_per_pixel
    if raw.size % bpp != 0:
        raise DecodeError(
            f"Buffer length {raw.size} is not a multiple of {bpp} bytes per pixel"
        )
    return raw.view(descriptor.dtype)


def decode_raw(buffer: Any, descriptor: PixelTypeDescriptor) -> DecodedPlane:
    """Decode ``buffer`` losslessly into the representation picked for ``descriptor``.

    Conversion is by numeric value: an unsigned byte ``255`` becomes the
    ``int16`` value ``255`` and an ``int32`` value becomes the equal ``float64``.
    """

    representation = select_representation(descriptor)
    samples = read_samples(buffer, descriptor)
    values = samples.astype(representation.dtype, copy=True)
    logger.debug(
        "Decoded %d samples (%s) as %s", values.size, descriptor.dtype.str, representation.value
    )
    return DecodedPlane(representation=representation, values=values)


def decode_raw_bytes(
    buffer: Any,
    *,
    bytes_per_pixel: int,
    signed: bool,
    floating_point: bool,
    little_endian: bool,
) -> DecodedPlane:
    descriptor = PixelTypeDescriptor(
        bytes_per_pixel=bytes_per_pixel,
        signed=signed,
        floating_point=floating_point,
        little_endian=little_endian,
    )
    return decode_raw(buffer, descriptor)
