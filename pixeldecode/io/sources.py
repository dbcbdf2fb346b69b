"""Plane sources: the boundary to whatever actually reads image files.

A source is opened on a path and hands out the raw bytes of plane regions
together with the geometry needed to decode them. Format parsing lives
entirely on the source side; the rest of ``pixeldecode`` only sees bytes and a
:class:`~pixeldecode.pixels.PixelTypeDescriptor`.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import numpy as np

from ..pixels.pixel_type import (
    PixelType,
    PixelTypeDescriptor,
    bytes_per_pixel,
    default_bits_per_pixel,
    parse_pixel_type,
    pixel_type_from_dtype,
)
from ..utils.param_check import check_dimension_order, check_region
from .dimensions import plane_coords, plane_index
from .registry import register_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaneGeometry:
    size_x: int
    size_y: int
    size_z: int
    size_c: int
    size_t: int
    dimension_order: str
    pixel_type: PixelType
    little_endian: bool
    bits_per_pixel: int
    rgb_channel_count: int = 1

    @property
    def image_count(self) -> int:
        return self.size_z * self.size_c * self.size_t

    @property
    def bytes_per_pixel(self) -> int:
        return bytes_per_pixel(self.pixel_type)

    def descriptor(self) -> PixelTypeDescriptor:
        return PixelTypeDescriptor.from_pixel_type(
            self.pixel_type,
            little_endian=self.little_endian,
            bits_per_pixel=self.bits_per_pixel,
        )

    def plane_index(self, z: int, c: int, t: int) -> int:
        return plane_index(self.dimension_order, self.size_z, self.size_c, self.size_t, z, c, t)

    def plane_coords(self, index: int) -> tuple[int, int, int]:
        return plane_coords(self.dimension_order, self.size_z, self.size_c, self.size_t, index)


class PlaneSource(ABC):
    """Base class for plane sources."""

    def __init__(self) -> None:
        self._current_file: Optional[str] = None
        self._geometry: Optional[PlaneGeometry] = None

    @property
    def is_open(self) -> bool:
        return self._geometry is not None

    @property
    def current_file(self) -> Optional[str]:
        return self._current_file

    @property
    def geometry(self) -> PlaneGeometry:
        if self._geometry is None:
            raise RuntimeError(f"{type(self).__name__} is not open")
        return self._geometry

    @property
    def original_metadata(self) -> dict[str, Any]:
        return {}

    def open(self, path: str | Path) -> None:
        if self.is_open:
            self.close()
        self._geometry = self._open(Path(path))
        self._current_file = str(path)
        logger.debug("Opened %s with %s", self._current_file, self._geometry)

    def open_bytes(self, index: int, x: int, y: int, width: int, height: int) -> bytes:
        """Return the raw bytes of one region of plane ``index`` in row-major order."""

        geom = self.geometry
        if not 0 <= int(index) < geom.image_count:
            raise IndexError(f"Plane index {index} out of range for {geom.image_count} planes")
        x, y, width, height = check_region(
            x, y, width, height, size_x=geom.size_x, size_y=geom.size_y
        )
        return self._read_region(int(index), x, y, width, height)

    def close(self) -> None:
        self._geometry = None
        self._current_file = None

    @abstractmethod
    def _open(self, path: Path) -> PlaneGeometry:
        ...

    @abstractmethod
    def _read_region(self, index: int, x: int, y: int, width: int, height: int) -> bytes:
        ...


def _split_sizes(
    n_planes: int,
    size_z: Optional[int],
    size_c: Optional[int],
    size_t: Optional[int],
) -> tuple[int, int, int]:
    size_c = 1 if size_c is None else int(size_c)
    size_t = 1 if size_t is None else int(size_t)
    if size_c < 1 or size_t < 1:
        raise ValueError(f"size_c and size_t must be >= 1, got {size_c}, {size_t}")
    if size_z is None:
        if n_planes % (size_c * size_t) != 0:
            raise ValueError(
                f"{n_planes} planes cannot be split into size_c={size_c}, size_t={size_t}"
            )
        size_z = n_planes // (size_c * size_t)
    size_z = int(size_z)
    if size_z * size_c * size_t != n_planes:
        raise ValueError(
            f"size_z*size_c*size_t = {size_z * size_c * size_t} does not match {n_planes} planes"
        )
    return size_z, size_c, size_t


@register_source("array", tags=("memory",))
class ArrayPlaneSource(PlaneSource):
    """Serve planes from an in-memory array shaped ``(planes, height, width)``.

    A 2-D array is a single plane. The pixel type and byte order come from
    the array's dtype, so a ``>u2`` array hands out big-endian bytes.
    """

    def __init__(
        self,
        array: Any,
        *,
        dimension_order: str = "XYCZT",
        size_z: Optional[int] = None,
        size_c: Optional[int] = None,
        size_t: Optional[int] = None,
        bits_per_pixel: Optional[int] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__()
        arr = np.asarray(array)
        self._pixel_type = pixel_type_from_dtype(arr.dtype)
        if arr.dtype == np.bool_:
            # bit planes are handed out one byte per sample
            arr = arr.astype(np.uint8)
        if arr.ndim == 2:
            arr = arr[np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Expected shape (planes, H, W) or (H, W), got {arr.shape}")
        self._array = arr
        self._dimension_order = check_dimension_order(dimension_order)
        self._sizes = _split_sizes(arr.shape[0], size_z, size_c, size_t)
        self._bits_per_pixel = bits_per_pixel
        self._metadata = dict(metadata or {})

    @property
    def original_metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def _open(self, path: Path) -> PlaneGeometry:
        size_z, size_c, size_t = self._sizes
        dtype = self._array.dtype
        bits = self._bits_per_pixel or default_bits_per_pixel(self._pixel_type)
        return PlaneGeometry(
            size_x=int(self._array.shape[2]),
            size_y=int(self._array.shape[1]),
            size_z=size_z,
            size_c=size_c,
            size_t=size_t,
            dimension_order=self._dimension_order,
            pixel_type=self._pixel_type,
            little_endian=PixelTypeDescriptor.from_dtype(dtype).little_endian,
            bits_per_pixel=int(bits),
        )

    def _read_region(self, index: int, x: int, y: int, width: int, height: int) -> bytes:
        region = self._array[index, y : y + height, x : x + width]
        return np.ascontiguousarray(region).tobytes()


@register_source("raw", tags=("file",))
class RawPlaneSource(PlaneSource):
    """Read planes from a headerless raw file with caller-declared geometry.

    Planes are stored back to back after ``offset`` bytes, in
    ``dimension_order``. The file is memory-mapped, so only requested
    regions are read.
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixel_type: str | PixelType,
        *,
        little_endian: bool = True,
        offset: int = 0,
        size_z: int = 1,
        size_c: int = 1,
        size_t: int = 1,
        dimension_order: str = "XYCZT",
        bits_per_pixel: Optional[int] = None,
    ) -> None:
        super().__init__()
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Plane size must be positive, got {width}x{height}")
        if int(offset) < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        self.width = int(width)
        self.height = int(height)
        self.pixel_type = parse_pixel_type(pixel_type)
        self.little_endian = bool(little_endian)
        self.offset = int(offset)
        self.sizes = (int(size_z), int(size_c), int(size_t))
        if min(self.sizes) < 1:
            raise ValueError(f"size_z, size_c and size_t must be >= 1, got {self.sizes}")
        self.dimension_order = check_dimension_order(dimension_order)
        self.bits_per_pixel = bits_per_pixel
        self._mm: Optional[np.memmap] = None

    @property
    def plane_bytes(self) -> int:
        return self.width * self.height * bytes_per_pixel(self.pixel_type)

    def _open(self, path: Path) -> PlaneGeometry:
        size_z, size_c, size_t = self.sizes
        count = size_z * size_c * size_t
        expected = self.offset + count * self.plane_bytes
        actual = os.path.getsize(path)
        if actual < expected:
            raise ValueError(
                f"Raw file {str(path)!r} has {actual} bytes, expected at least {expected} "
                f"for {count} plane(s) of {self.width}x{self.height} {self.pixel_type.value}"
            )
        if actual > expected:
            logger.warning(
                "Raw file %s has %d trailing bytes beyond the declared geometry",
                path,
                actual - expected,
            )

        bpp = bytes_per_pixel(self.pixel_type)
        self._mm = np.memmap(
            path,
            dtype=np.uint8,
            mode="r",
            offset=self.offset,
            shape=(count, self.height, self.width * bpp),
        )
        return PlaneGeometry(
            size_x=self.width,
            size_y=self.height,
            size_z=size_z,
            size_c=size_c,
            size_t=size_t,
            dimension_order=self.dimension_order,
            pixel_type=self.pixel_type,
            little_endian=self.little_endian,
            bits_per_pixel=int(self.bits_per_pixel or default_bits_per_pixel(self.pixel_type)),
        )

    def _read_region(self, index: int, x: int, y: int, width: int, height: int) -> bytes:
        if self._mm is None:
            raise RuntimeError("RawPlaneSource is not open")
        bpp = bytes_per_pixel(self.pixel_type)
        region = self._mm[index, y : y + height, x * bpp : (x + width) * bpp]
        return region.tobytes()

    def close(self) -> None:
        mm, self._mm = self._mm, None
        if mm is not None:
            handle = mm._mmap
            # the array holds a buffer export on the mapping; drop it first
            del mm
            if handle is not None:
                handle.close()
        super().close()
