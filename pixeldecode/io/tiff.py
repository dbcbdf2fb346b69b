from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np

from ..utils.optional_deps import require
from .registry import register_source
from .sources import ArrayPlaneSource, PlaneGeometry, PlaneSource

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float)


def _plane_layout(axes: str, shape: tuple[int, ...]) -> tuple[str, dict[str, int]]:
    """Return ``(dimension_order, sizes)`` for the axes leading up to ``YX``.

    Samples (``S``) count as channels. Axes that do not map onto Z/C/T are
    flattened into Z.
    """

    leading = ["C" if a == "S" else a for a in axes[:-2]]
    sizes = dict(zip(leading, shape[:-2]))
    if len(set(leading)) == len(leading) and set(leading) <= {"Z", "C", "T"}:
        order = "XY" + "".join(reversed(leading)) + "".join(a for a in "ZCT" if a not in leading)
        return order, {a: int(sizes.get(a, 1)) for a in "ZCT"}

    n_planes = int(np.prod(shape[:-2], dtype=np.int64)) if leading else 1
    logger.debug("Flattening TIFF axes %r into %d Z planes", axes, n_planes)
    return "XYZCT", {"Z": n_planes, "C": 1, "T": 1}


@register_source("tiff", tags=("file",))
class TiffPlaneSource(PlaneSource):
    """Serve the planes of one TIFF series, read through ``tifffile``.

    Interleaved samples (RGB) are split into separate channel planes. The
    OME-XML header, when present, is exposed as ``original_metadata["ome_xml"]``.
    """

    def __init__(self, *, series: int = 0) -> None:
        super().__init__()
        self.series = int(series)
        self._planes: Optional[ArrayPlaneSource] = None
        self._metadata: dict[str, Any] = {}

    @property
    def original_metadata(self) -> dict[str, Any]:
        return dict(self._metadata)

    def _open(self, path: Path) -> PlaneGeometry:
        tifffile = require("tifffile", purpose="reading TIFF planes")

        with tifffile.TiffFile(str(path)) as tif:
            series = tif.series[self.series]
            arr = np.asarray(series.asarray())
            axes = str(series.axes).upper()
            page = tif.pages[0]
            bits = int(getattr(page, "bitspersample", arr.dtype.itemsize * 8))
            metadata = {
                tag.name: tag.value for tag in page.tags if isinstance(tag.value, _SCALAR_TYPES)
            }
            if tif.ome_metadata:
                metadata["ome_xml"] = tif.ome_metadata

        if "S" in axes:
            moved = [a for a in axes if a != "S"]
            moved.insert(moved.index("Y"), "S")
            arr = np.moveaxis(arr, axes.index("S"), moved.index("S"))
            axes = "".join(moved)
        if not axes.endswith("YX"):
            raise ValueError(f"Unsupported TIFF axes {axes!r}: expected trailing 'YX'")

        order, sizes = _plane_layout(axes, arr.shape)
        height, width = int(arr.shape[-2]), int(arr.shape[-1])
        self._metadata = metadata
        self._planes = ArrayPlaneSource(
            arr.reshape(-1, height, width),
            dimension_order=order,
            size_z=sizes["Z"],
            size_c=sizes["C"],
            size_t=sizes["T"],
            bits_per_pixel=bits,
        )
        self._planes.open(path)
        return self._planes.geometry

    def _read_region(self, index: int, x: int, y: int, width: int, height: int) -> bytes:
        if self._planes is None:
            raise RuntimeError("TiffPlaneSource is not open")
        return self._planes.open_bytes(index, x, y, width, height)

    def close(self) -> None:
        if self._planes is not None:
            self._planes.close()
        self._planes = None
        self._metadata = {}
        super().close()
