"""Reader session options and their file representation.

Example ``session.yaml``::

    reader:
      filter_metadata: true
      populate_original_metadata: false
      collect_metadata: true
      output_order: XYCZT
    source:
      name: raw
      kwargs: {width: 512, height: 512, pixel_type: uint16, little_endian: false}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

from ..utils.param_check import check_dimension_order
from .io import load_config


def _coerce_bool(value: Any, *, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(int(value))
    raise ValueError(f"reader option {name!r} must be a boolean, got {value!r}")


def _require_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"{name!r} must be a mapping, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ReaderOptions:
    filter_metadata: bool = True
    populate_original_metadata: bool = False
    collect_metadata: bool = True
    flatten_resolutions: bool = False
    output_order: str = "XYCZT"

    def __post_init__(self) -> None:
        object.__setattr__(self, "output_order", check_dimension_order(self.output_order))
        if self.flatten_resolutions:
            raise ValueError("flatten_resolutions is not supported; only the full-resolution series is read")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ReaderOptions":
        payload = _require_mapping(payload, name="reader")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown reader option(s): {unknown}. Allowed: {sorted(known)}")

        kwargs: dict[str, Any] = {}
        for key, value in payload.items():
            if key == "output_order":
                kwargs[key] = str(value)
            else:
                kwargs[key] = _coerce_bool(value, name=key)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SessionConfig:
    options: ReaderOptions = field(default_factory=ReaderOptions)
    source: str = "raw"
    source_kwargs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SessionConfig":
        payload = _require_mapping(payload, name="config")
        unknown = sorted(set(payload) - {"reader", "source"})
        if unknown:
            raise ValueError(f"Unknown config section(s): {unknown}. Allowed: ['reader', 'source']")

        options = ReaderOptions.from_dict(payload.get("reader") or {})
        source = _require_mapping(payload.get("source") or {}, name="source")
        kwargs = _require_mapping(source.get("kwargs") or {}, name="source.kwargs")
        return cls(options=options, source=str(source.get("name", "raw")), source_kwargs=dict(kwargs))


def load_reader_options(path: str | Path) -> ReaderOptions:
    """Load :class:`ReaderOptions` from the ``reader`` section of a config file."""

    return load_session_config(path).options


def load_session_config(path: str | Path) -> SessionConfig:
    return SessionConfig.from_dict(load_config(path))
