"""pixeldecode - decode and normalize raw image plane buffers.

Keep top-level imports lightweight: the pixel decoding core only needs
numpy, while sources such as TIFF pull in optional deps. Exports are
resolved lazily on first access.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"

__all__ = [
    # Modules
    "config",
    "io",
    "pixels",
    "session",
    # Pixel decoding
    "DecodeError",
    "DecodedPlane",
    "OutputRepresentation",
    "PixelType",
    "PixelTypeDescriptor",
    "UnsupportedWidth",
    "decode_raw",
    "decode_raw_bytes",
    "normalize",
    "normalize_bytes",
    "select_representation",
    # Sessions
    "ReaderOptions",
    "ReaderSession",
    "open_session",
]


_LAZY_SUBMODULES = {
    "config",
    "io",
    "pixels",
    "session",
}

_LAZY_EXPORTS = {
    "DecodeError": ("pixels", "DecodeError"),
    "DecodedPlane": ("pixels", "DecodedPlane"),
    "OutputRepresentation": ("pixels", "OutputRepresentation"),
    "PixelType": ("pixels", "PixelType"),
    "PixelTypeDescriptor": ("pixels", "PixelTypeDescriptor"),
    "UnsupportedWidth": ("pixels", "UnsupportedWidth"),
    "decode_raw": ("pixels", "decode_raw"),
    "decode_raw_bytes": ("pixels", "decode_raw_bytes"),
    "normalize": ("pixels", "normalize"),
    "normalize_bytes": ("pixels", "normalize_bytes"),
    "select_representation": ("pixels", "select_representation"),
    "ReaderOptions": ("config", "ReaderOptions"),
    "ReaderSession": ("session", "ReaderSession"),
    "open_session": ("session", "open_session"),
}


def __getattr__(name: str) -> Any:  # pragma: no cover - thin delegation
    if name in _LAZY_SUBMODULES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module

    target = _LAZY_EXPORTS.get(name)
    if target is not None:
        module_name, attr = target
        module = import_module(f"{__name__}.{module_name}")
        value = getattr(module, attr)
        globals()[name] = value
        return value

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover - tooling nicety
    return sorted(set(globals()) | set(__all__))
