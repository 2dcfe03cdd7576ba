"""Concrete implementation of the query-result Caching Service.

Keeps results of expensive lookups in memory for a limited time. Entries
expire lazily when read and eagerly when `cleanup()` sweeps the store.
When the store is full, the earliest-inserted key is evicted (FIFO,
not LRU: reads never change an entry's position).
"""

import logging
import math
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

# Domain Layer Imports
from docketcache.domain.interfaces.cache import CacheService
from docketcache.domain.models.cache import CacheEntry, DEFAULT_TTL, MAX_SIZE
from docketcache.domain.models.common import CacheKey, CachePrefix, CacheStats
from docketcache.domain.events.cache_events import (
    DomainEvent, CacheHit, CacheMiss, CacheEntryStored, CacheEntryEvicted,
    CacheEntriesExpired, CachePrefixCleared, CacheCleared, CacheFetchCompleted
)
from docketcache.infrastructure.cache import key_builder

logger = logging.getLogger(__name__)

T = TypeVar("T")
Clock = Callable[[], float]
EventListener = Callable[[DomainEvent], None]

_MISSING = object()

def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000

class CachingServiceImpl(CacheService):
    """Bounded in-memory cache with per-entry TTL and hit/miss statistics."""

    def __init__(
        self,
        max_size: int = MAX_SIZE,
        default_ttl: int = DEFAULT_TTL,
        clock: Optional[Clock] = None,
        event_listener: Optional[EventListener] = None,
    ):
        """Initializes an empty cache.

        Args:
            max_size: Maximum number of entries held at once.
            default_ttl: Lifetime in ms used when `set` gets no ttl.
            clock: Zero-argument callable returning the current time in ms.
            event_listener: Optional callable receiving cache domain events.
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock or monotonic_ms
        self._event_listener = event_listener
        # Insertion order of this dict is the eviction order.
        self._store: Dict[CacheKey, CacheEntry[Any]] = {}
        self._hits = 0
        self._misses = 0
        logger.info(f"CachingService initialized (max_size={max_size}, default_ttl={default_ttl}ms)")

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        """Raw membership test on the store. Does not check expiry or count stats."""
        return key in self._store

    def _emit(self, event: DomainEvent) -> None:
        if self._event_listener is None:
            return
        try:
            self._event_listener(event)
        except Exception as e:
            logger.error(f"Cache event listener failed on {type(event).__name__}: {e}", exc_info=True)

    def _lookup(self, key: CacheKey) -> Any:
        """Returns the live value for `key` or `_MISSING`, counting one hit or miss."""
        entry = self._store.get(key)
        if entry is None:
            self._misses += 1
            logger.debug(f"Cache MISS for key: {key}")
            self._emit(CacheMiss(key=key, reason="absent"))
            return _MISSING

        if entry.is_expired(self._clock()):
            del self._store[key]
            self._misses += 1
            logger.debug(f"Cache EXPIRED key: {key}")
            self._emit(CacheMiss(key=key, reason="expired"))
            return _MISSING

        self._hits += 1
        logger.debug(f"Cache HIT for key: {key}")
        self._emit(CacheHit(key=key))
        return entry.data

    def _store_entry(self, key: CacheKey, data: Any, ttl: Optional[int]) -> None:
        effective_ttl = ttl if ttl is not None else self.default_ttl
        replaced = key in self._store

        if not replaced and len(self._store) >= self.max_size:
            oldest_key = next(iter(self._store))
            del self._store[oldest_key]
            logger.debug(f"Cache EVICTED key (FIFO): {oldest_key}")
            self._emit(CacheEntryEvicted(key=oldest_key))

        # Assigning to an existing key keeps its original insertion position.
        self._store[key] = CacheEntry(data=data, stored_at=self._clock(), ttl=effective_ttl)
        logger.debug(f"Cache PUT key: {key} TTL: {effective_ttl}ms")
        self._emit(CacheEntryStored(key=key, ttl=effective_ttl, replaced=replaced))

    # --- CacheService Interface Implementation ---

    def generate_key(self, prefix: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
        """Builds the deterministic key for a prefix and parameters."""
        return key_builder.generate_key(prefix, params)

    def get(self, prefix: str, params: Optional[Mapping[str, Any]] = None) -> Optional[Any]:
        """Retrieves a live value, or None on a miss."""
        value = self._lookup(self.generate_key(prefix, params))
        return None if value is _MISSING else value

    def set(
        self,
        prefix: str,
        params: Optional[Mapping[str, Any]],
        data: Any,
        ttl: Optional[int] = None,
    ) -> None:
        """Stores `data`, evicting the oldest entry first if a new key would overflow."""
        self._store_entry(self.generate_key(prefix, params), data, ttl)

    def clear_by_prefix(self, prefix: str) -> int:
        """Removes every entry whose key starts with `prefix:`."""
        marker = key_builder.prefix_marker(prefix)
        keys_to_delete = [k for k in self._store if k.startswith(marker)]
        for k in keys_to_delete:
            del self._store[k]
        if keys_to_delete:
            logger.info(f"Cleared {len(keys_to_delete)} cache entries with prefix '{prefix}'.")
        self._emit(CachePrefixCleared(prefix=CachePrefix(prefix), count=len(keys_to_delete)))
        return len(keys_to_delete)

    def clear_all(self) -> None:
        """Empties the store and resets the counters."""
        count = len(self._store)
        self._store.clear()
        self._hits = 0
        self._misses = 0
        logger.info(f"Cleared query cache ({count} entries) and reset statistics.")
        self._emit(CacheCleared(count=count))

    def get_stats(self) -> CacheStats:
        """Returns hits, misses, current size and hit rate (percent, two decimals, halves up)."""
        total = self._hits + self._misses
        hit_rate = (self._hits / total) * 100 if total > 0 else 0.0
        return CacheStats(
            hits=self._hits,
            misses=self._misses,
            size=len(self),
            # Halves round up, so 0.125 reads as 0.13
            hit_rate=math.floor(hit_rate * 100 + 0.5) / 100,
        )

    def cleanup(self) -> int:
        """Removes expired entries whether or not they were ever read again."""
        now = self._clock()
        expired_keys = [k for k, entry in self._store.items() if entry.is_expired(now)]
        for k in expired_keys:
            del self._store[k]
        if expired_keys:
            logger.debug(f"Cache cleanup removed {len(expired_keys)} expired entries.")
            self._emit(CacheEntriesExpired(count=len(expired_keys)))
        return len(expired_keys)

    async def get_or_fetch(
        self,
        prefix: str,
        params: Optional[Mapping[str, Any]],
        fetch_fn: Callable[[], Awaitable[T]],
        ttl: Optional[int] = None,
    ) -> T:
        """Returns the cached value or fetches, caches and returns a fresh one.

        A cached None is a hit like any other value. Failures from `fetch_fn`
        propagate and are never cached.
        """
        key = self.generate_key(prefix, params)
        cached = self._lookup(key)
        if cached is not _MISSING:
            return cached

        started = time.perf_counter()
        try:
            data = await fetch_fn()
        except Exception as e:
            logger.debug(f"Fetch for key {key} failed, nothing cached: {e}")
            raise
        latency_ms = (time.perf_counter() - started) * 1000

        self._store_entry(key, data, ttl)
        self._emit(CacheFetchCompleted(key=key, latency_ms=latency_ms, ttl=ttl))
        return data
