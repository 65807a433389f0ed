"""Lazy memoized value cache.

The cache stores at most one value per key and serves repeated requests
without recomputation. Failures are never stored: if a producer raises,
the exception propagates and the next request invokes it again.

The check-then-populate sequence runs under a re-entrant lock, so a
producer runs at most once even when several threads share a resolver,
while a producer may still query the cache from its own thread.
"""

from threading import RLock
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from lazycore.values import Thunk, Value

#: Cache layer for values resolved without overrides.
CORE = 'core'

#: Cache layer for values resolved with overrides.
EFFECTIVE = 'effective'


class CacheKey(NamedTuple):
    """Key of one cached value.

    Whole-category results are stored with `name` set to `None`.
    """

    layer: str
    category: str
    name: str | None = None


class LazyCache:
    """Memoized storage of resolved values owned by one resolver."""

    def __init__(self) -> None:
        """Initialize an empty cache."""
        self._values: dict[CacheKey, Value] = {}
        self._lock = RLock()

    def __contains__(self, key: object) -> bool:
        """Check whether a value is cached for the key."""
        return key in self._values

    def __len__(self) -> int:
        """Return the number of cached values."""
        return len(self._values)

    def get(self, key: CacheKey, producer: 'Thunk') -> 'Value':
        """Return the cached value or produce and cache it.

        Args:
            key: Cache key of the value.
            producer: Callable invoked on a cache miss.

        Returns:
            The cached or freshly produced value.

        Raises:
            Any exception raised by the producer. Nothing is cached then.
        """
        with self._lock:
            if key in self._values:
                return self._values[key]

            value = producer()
            self._values[key] = value

            return value

    def invalidate(self, category: str) -> None:
        """Drop every cached value of a category in all layers.

        Args:
            category: Name of the category to forget.
        """
        with self._lock:
            for key in [key for key in self._values if key.category == category]:
                del self._values[key]

    def clear(self) -> None:
        """Drop all cached values."""
        with self._lock:
            self._values.clear()
