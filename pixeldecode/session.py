"""Reader sessions: one open file, its metadata, and plane reads.

A session is an explicit handle owned by the caller; nothing is shared
between sessions. Reads take a snapshot of the pixel type descriptor while
holding the session lock, then decode outside of it.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from .config.options import ReaderOptions, load_session_config
from .io.dimensions import plane_coords, plane_index
from .io.registry import create_source
from .io.sources import PlaneGeometry, PlaneSource
from .metadata import DummyMetadataStore, MetadataStore, populate_metadata
from .pixels.decode import DecodedPlane, decode_raw
from .pixels.errors import DecodeError
from .pixels.normalize import normalize as normalize_buffer
from .pixels.pixel_type import PixelTypeDescriptor

logger = logging.getLogger(__name__)


class ReaderSession:
    """Read plane regions of one file through a :class:`PlaneSource`.

    Examples
    --------
    >>> from pixeldecode.io import RawPlaneSource
    >>> source = RawPlaneSource(256, 256, "uint16", little_endian=False)
    >>> with ReaderSession(source).setup("plane.raw") as session:  # doctest: +SKIP
    ...     plane = session.read_pixels(0)
    ...     scaled = session.read_pixels(0, normalize=True)
    """

    def __init__(self, source: PlaneSource) -> None:
        if not isinstance(source, PlaneSource):
            raise TypeError(f"Expected PlaneSource, got {type(source).__name__}")
        self._source = source
        self._options: Optional[ReaderOptions] = None
        self._metadata: Optional[MetadataStore] = None
        self._lock = threading.RLock()

    def __enter__(self) -> "ReaderSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    def setup(self, path: str | Path, options: Optional[ReaderOptions] = None) -> "ReaderSession":
        opts = options if options is not None else ReaderOptions()
        with self._lock:
            self._source.open(path)
            store = MetadataStore() if opts.collect_metadata else DummyMetadataStore()
            populate_metadata(
                store,
                self._source,
                include_original=opts.populate_original_metadata,
                filter_metadata=opts.filter_metadata,
            )
            self._options = opts
            self._metadata = store

        geom = self._source.geometry
        logger.info(
            "Opened %s: %dx%d, %d plane(s), %s, output order %s",
            path,
            geom.size_x,
            geom.size_y,
            geom.image_count,
            geom.pixel_type.value,
            opts.output_order,
        )
        return self

    def close(self) -> None:
        with self._lock:
            self._source.close()
            self._options = None
            self._metadata = None

    def _require_open(self) -> ReaderOptions:
        if self._options is None:
            raise RuntimeError("Reader session is not set up; call setup(path) first")
        return self._options

    # ------------------------------------------------------------------
    @property
    def current_file(self) -> Optional[str]:
        self._require_open()
        return self._source.current_file

    @property
    def options(self) -> ReaderOptions:
        return self._require_open()

    @property
    def metadata(self) -> MetadataStore:
        self._require_open()
        if self._metadata is None:
            raise RuntimeError("Reader session has no metadata store")
        return self._metadata

    @property
    def geometry(self) -> PlaneGeometry:
        self._require_open()
        return self._source.geometry

    def pixel_type_descriptor(self) -> PixelTypeDescriptor:
        return self.geometry.descriptor()

    def plane_index(self, z: int, c: int, t: int) -> int:
        """Index of plane ``(z, c, t)`` in the session's output order."""

        opts = self._require_open()
        geom = self._source.geometry
        return plane_index(opts.output_order, geom.size_z, geom.size_c, geom.size_t, z, c, t)

    def plane_coords(self, index: int) -> tuple[int, int, int]:
        opts = self._require_open()
        geom = self._source.geometry
        return plane_coords(opts.output_order, geom.size_z, geom.size_c, geom.size_t, index)

    # ------------------------------------------------------------------
    def read_bytes(
        self,
        index: int,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> tuple[bytes, PixelTypeDescriptor]:
        """Fetch the raw bytes of a plane region and the descriptor to decode them with."""

        with self._lock:
            geom = self.geometry
            w = geom.size_x - int(x) if width is None else width
            h = geom.size_y - int(y) if height is None else height
            z, c, t = self.plane_coords(index)
            native = geom.plane_index(z, c, t)
            descriptor = geom.descriptor()

            buf = self._source.open_bytes(native, x, y, w, h)

        expected = int(w) * int(h) * geom.bytes_per_pixel * geom.rgb_channel_count
        if len(buf) != expected:
            raise DecodeError(
                f"Source returned {len(buf)} bytes for a {w}x{h} region, expected {expected}"
            )
        logger.debug(
            "Read plane %d (z=%d c=%d t=%d, native %d) region x=%d y=%d w=%d h=%d",
            index, z, c, t, native, x, y, w, h,
        )
        return buf, descriptor

    def read_pixels(
        self,
        index: int,
        x: int = 0,
        y: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
        *,
        normalize: bool = False,
    ) -> Union[DecodedPlane, np.ndarray]:
        """Read a plane region, decoded or normalized.

        ``width``/``height`` default to the rest of the plane from ``(x, y)``.
        Returns a :class:`DecodedPlane` or, with ``normalize=True``, a
        ``float64`` array scaled into ``[0, 1]``. Samples are row-major and
        flat; use ``DecodedPlane.reshape`` for 2-D access.
        """

        buf, descriptor = self.read_bytes(index, x, y, width, height)
        if normalize:
            return normalize_buffer(buf, descriptor)
        return decode_raw(buf, descriptor)


def open_session(
    path: str | Path,
    source: Union[str, PlaneSource] = "raw",
    *,
    options: Optional[ReaderOptions] = None,
    **source_kwargs: Any,
) -> ReaderSession:
    """Create a source (by registry name, or use the given instance) and set up a session on ``path``."""

    if isinstance(source, PlaneSource):
        if source_kwargs:
            raise TypeError("source_kwargs are only accepted together with a source name")
        plane_source = source
    else:
        plane_source = create_source(str(source), **source_kwargs)
    return ReaderSession(plane_source).setup(path, options)


def open_session_from_config(path: str | Path, config_path: str | Path) -> ReaderSession:
    """Set up a session on ``path`` using source and reader options from a config file."""

    config = load_session_config(config_path)
    logger.debug("Loaded session config from %s: source=%s", config_path, config.source)
    return open_session(path, config.source, options=config.options, **config.source_kwargs)
