"""Interface for the query-result cache.

Defines the contract for storing, retrieving and expiring cached lookup
results, addressed by a namespace prefix plus a parameter mapping.
"""

import abc
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

# Import relevant domain models
from ..models.common import CacheKey, CacheStats

T = TypeVar("T")


class CacheError(Exception):
    """Base class for cache errors."""


class CacheKeyError(CacheError, ValueError):
    """Raised when lookup parameters cannot be serialized into a key."""


class CacheService(abc.ABC):
    """Abstract Base Class for the bounded, expiring query cache."""

    @abc.abstractmethod
    def generate_key(self, prefix: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
        """Builds the deterministic key for a prefix and parameter mapping.

        Args:
            prefix: Namespace for the key (e.g., 'search').
            params: Parameter name to JSON-serializable value.

        Returns:
            The cache key. Parameter order never affects the result.

        Raises:
            CacheKeyError: If a parameter value cannot be serialized.
        """
        pass

    @abc.abstractmethod
    def get(self, prefix: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Any]:
        """Retrieves a live cached value.

        Counts exactly one hit or one miss. Expired entries are removed.

        Returns:
            The cached value, or None if absent or expired.
        """
        pass

    @abc.abstractmethod
    def set(
        self,
        prefix: str,
        params: Optional[Mapping[str, Any]],
        data: Any,
        ttl: Optional[int] = None,
    ) -> None:
        """Stores a value, evicting the oldest entry if the store is full.

        Args:
            prefix: Namespace for the key.
            params: Parameters identifying the query.
            data: The value to cache.
            ttl: Time-to-live in milliseconds (uses the default if None).
        """
        pass

    @abc.abstractmethod
    def clear_by_prefix(self, prefix: str) -> int:
        """Removes every entry under the prefix. Returns the number removed."""
        pass

    @abc.abstractmethod
    def clear_all(self) -> None:
        """Empties the store and resets hit/miss counters."""
        pass

    @abc.abstractmethod
    def get_stats(self) -> CacheStats:
        """Returns a snapshot of counters, size and hit rate."""
        pass

    @abc.abstractmethod
    def cleanup(self) -> int:
        """Removes all expired entries. Returns the number removed."""
        pass

    @abc.abstractmethod
    async def get_or_fetch(
        self,
        prefix: str,
        params: Optional[Mapping[str, Any]],
        fetch_fn: Callable[[], Awaitable[T]],
        ttl: Optional[int] = None,
    ) -> T:
        """Returns the cached value or awaits `fetch_fn` and caches its result.

        Exceptions raised by `fetch_fn` propagate and nothing is cached.
        Concurrent calls for the same key are not deduplicated.
        """
        pass
