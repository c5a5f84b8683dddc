"""Option maps (id -> label) for form dropdowns.

Lookups are passed explicitly to whoever needs them. Caching is a separate
layer so tests can control when data is reloaded.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Iterable, Optional, Protocol


class Lookup(Protocol):
    def options(self) -> dict[Any, str]:
        raise NotImplementedError


class RepositoryLookup:
    """Read-through lookup: every call hits the loader."""

    def __init__(self, loader: Callable[[], Iterable[tuple[Any, str]]]):
        self._loader = loader

    def options(self) -> dict[Any, str]:
        return dict(self._loader())


class CachedLookup:
    """Caches another lookup until invalidated or until ttl_seconds pass.

    ttl_seconds=None keeps the cached map until invalidate() is called.
    """

    def __init__(
        self,
        source: Lookup,
        *,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock
        self._cached: Optional[dict[Any, str]] = None
        self._loaded_at = 0.0

    def _is_stale(self) -> bool:
        if self._cached is None:
            return True
        if self._ttl is None:
            return False
        return self._clock() - self._loaded_at >= self._ttl

    def options(self) -> dict[Any, str]:
        if self._is_stale():
            self._cached = self._source.options()
            self._loaded_at = self._clock()
        return dict(self._cached)

    def invalidate(self) -> None:
        self._cached = None


def invalidate(lookup: Optional[Lookup]) -> None:
    """Drop cached options if the lookup caches at all."""

    if lookup is not None and hasattr(lookup, "invalidate"):
        lookup.invalidate()
