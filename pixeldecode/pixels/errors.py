from __future__ import annotations


class PixelDecodeError(ValueError):
    """Base class for pixel decoding failures."""


class DecodeError(PixelDecodeError):
    """Raised when a buffer does not split into whole samples."""


class UnsupportedWidth(PixelDecodeError):
    """Raised for a pixel width/type combination no representation covers."""
