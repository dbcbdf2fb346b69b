from __future__ import annotations

from typing import Any, Mapping

from .io.sources import PlaneSource


class MetadataStore:
    """Per-file metadata gathered by a reader session.

    ``core`` holds the geometry every source reports; ``original`` holds the
    source's own key/value metadata when the session asks for it.
    """

    def __init__(self) -> None:
        self._core: dict[str, Any] = {}
        self._original: dict[str, Any] = {}

    def set_core(self, key: str, value: Any) -> None:
        self._core[str(key)] = value

    def set_original(self, values: Mapping[str, Any]) -> None:
        self._original = dict(values)

    @property
    def core(self) -> dict[str, Any]:
        return dict(self._core)

    @property
    def original(self) -> dict[str, Any]:
        return dict(self._original)

    def as_dict(self) -> dict[str, Any]:
        return {"core": self.core, "original": self.original}


class DummyMetadataStore(MetadataStore):
    """Store that accepts and discards everything."""

    def set_core(self, key: str, value: Any) -> None:
        pass

    def set_original(self, values: Mapping[str, Any]) -> None:
        pass


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def populate_metadata(
    store: MetadataStore,
    source: PlaneSource,
    *,
    include_original: bool,
    filter_metadata: bool,
) -> MetadataStore:
    geom = source.geometry
    store.set_core("current_file", source.current_file)
    store.set_core("size_x", geom.size_x)
    store.set_core("size_y", geom.size_y)
    store.set_core("size_z", geom.size_z)
    store.set_core("size_c", geom.size_c)
    store.set_core("size_t", geom.size_t)
    store.set_core("image_count", geom.image_count)
    store.set_core("dimension_order", geom.dimension_order)
    store.set_core("pixel_type", geom.pixel_type.value)
    store.set_core("bits_per_pixel", geom.bits_per_pixel)
    store.set_core("little_endian", geom.little_endian)

    if include_original:
        original = source.original_metadata
        if filter_metadata:
            original = {k: v for k, v in original.items() if not _is_empty(v)}
        store.set_original(original)
    return store
