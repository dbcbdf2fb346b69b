from __future__ import annotations

from .io import load_config
from .options import ReaderOptions, SessionConfig, load_reader_options, load_session_config

__all__ = [
    "ReaderOptions",
    "SessionConfig",
    "load_config",
    "load_reader_options",
    "load_session_config",
]
