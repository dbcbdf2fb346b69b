"""Plane sources and the registry they are looked up in."""

from __future__ import annotations

from .dimensions import plane_coords, plane_index
from .registry import SOURCE_REGISTRY, create_source, list_sources, register_source
from .sources import ArrayPlaneSource, PlaneGeometry, PlaneSource, RawPlaneSource
from .tiff import TiffPlaneSource

__all__ = [
    "ArrayPlaneSource",
    "PlaneGeometry",
    "PlaneSource",
    "RawPlaneSource",
    "SOURCE_REGISTRY",
    "TiffPlaneSource",
    "create_source",
    "list_sources",
    "plane_coords",
    "plane_index",
    "register_source",
]
