"""Registry of plane source constructors, keyed by short names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional


@dataclass
class SourceEntry:
    name: str
    constructor: Callable[..., Any]
    tags: tuple[str, ...]


class SourceRegistry:
    def __init__(self) -> None:
        self._registry: Dict[str, SourceEntry] = {}

    def register(
        self,
        name: str,
        constructor: Callable[..., Any],
        *,
        tags: Optional[Iterable[str]] = None,
        overwrite: bool = False,
    ) -> None:
        if not overwrite and name in self._registry:
            raise KeyError(f"Source {name!r} already exists. Set overwrite=True to replace it.")
        self._registry[name] = SourceEntry(name=name, constructor=constructor, tags=tuple(tags or ()))

    def get(self, name: str) -> Callable[..., Any]:
        try:
            return self._registry[name].constructor
        except KeyError as exc:
            available = ", ".join(sorted(self._registry)) or "<empty>"
            raise KeyError(f"Source {name!r} not found. Available sources: {available}") from exc

    def available(self, *, tags: Optional[Iterable[str]] = None) -> List[str]:
        if tags is None:
            return sorted(self._registry)
        tag_set = set(tags)
        return sorted(e.name for e in self._registry.values() if tag_set.issubset(e.tags))

    def info(self, name: str) -> SourceEntry:
        if name not in self._registry:
            raise KeyError(f"Source {name!r} not found in registry")
        return self._registry[name]


SOURCE_REGISTRY = SourceRegistry()


def register_source(
    name: str,
    *,
    tags: Optional[Iterable[str]] = None,
    overwrite: bool = False,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator registering a plane source class under ``name`` at import time.

    >>> @register_source("my_format", tags=["file"])
    ... class MyFormatSource(PlaneSource):
    ...     ...
    """

    def decorator(constructor: Callable[..., Any]) -> Callable[..., Any]:
        SOURCE_REGISTRY.register(name, constructor, tags=tags, overwrite=overwrite)
        return constructor

    return decorator


def create_source(name: str, *args: Any, **kwargs: Any) -> Any:
    """Instantiate the plane source registered as ``name``."""

    return SOURCE_REGISTRY.get(name)(*args, **kwargs)


def list_sources(*, tags: Optional[Iterable[str]] = None) -> List[str]:
    return SOURCE_REGISTRY.available(tags=tags)
