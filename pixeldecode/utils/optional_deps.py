"""Optional dependency helpers.

The core install only needs numpy. File formats beyond headerless raw
(TIFF) and YAML option files are enabled via extras.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Optional, Tuple


_PIP_NAME_OVERRIDES = {
    "yaml": "PyYAML",
}

_EXTRA_FOR_MODULE = {
    "tifffile": "tiff",
    "yaml": "yaml",
}


def optional_import(module_name: str) -> Tuple[Optional[ModuleType], Optional[BaseException]]:
    """Attempt to import a module, returning (module, error)."""

    try:
        return import_module(module_name), None
    except ImportError as exc:
        return None, exc


def require(module_name: str, *, purpose: Optional[str] = None) -> ModuleType:
    """Import `module_name`, raising a clean ImportError with install hint if missing."""

    module, error = optional_import(module_name)
    if module is not None:
        return module

    root = str(module_name).split(".", 1)[0]
    extra = _EXTRA_FOR_MODULE.get(root)
    if extra is not None:
        hint = f"pip install 'pixeldecode[{extra}]'"
    else:
        hint = f"pip install '{_PIP_NAME_OVERRIDES.get(root, root)}'"

    context = f" for {purpose}" if purpose else ""
    raise ImportError(
        f"Optional dependency '{module_name}' is required{context}.\n"
        f"Install it via:\n  {hint}\n"
        f"Original error: {error}"
    ) from error
