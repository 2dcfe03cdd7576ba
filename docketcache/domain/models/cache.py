"""Entities owned by the cache store."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

# Time values are in milliseconds throughout the cache context.
DEFAULT_TTL = 5 * 60 * 1000  # 5 minutes
MAX_SIZE = 100               # Maximum number of cached entries


@dataclass
class CacheEntry(Generic[T]):
    """A single cached value with its insertion time and lifetime."""
    data: T
    stored_at: float # Clock reading (ms) when the entry was stored
    ttl: int         # Lifetime in ms

    def is_expired(self, now: float) -> bool:
        """An entry stays valid up to and including `stored_at + ttl`."""
        return now - self.stored_at > self.ttl
