"""Domain Events related to the query cache.

Emitted by the cache implementation to an optional listener, e.g. for
monitoring hit ratios or tracing why an entry disappeared.
"""

from dataclasses import dataclass, field
import time
from typing import Optional

from docketcache.domain.models.common import CacheKey, CachePrefix

# Base Event Class
@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

# --- Lookup Events ---

@dataclass
class CacheHit(DomainEvent):
    """A lookup found a live entry."""
    key: CacheKey
    timestamp: float = field(default_factory=time.time)

@dataclass
class CacheMiss(DomainEvent):
    """A lookup found nothing usable."""
    key: CacheKey
    reason: str # 'absent' or 'expired'
    timestamp: float = field(default_factory=time.time)

# --- Store Mutation Events ---

@dataclass
class CacheEntryStored(DomainEvent):
    """An entry was written (new key or overwrite)."""
    key: CacheKey
    ttl: int
    replaced: bool = False
    timestamp: float = field(default_factory=time.time)

@dataclass
class CacheEntryEvicted(DomainEvent):
    """The oldest entry was dropped to make room for a new key."""
    key: CacheKey
    timestamp: float = field(default_factory=time.time)

@dataclass
class CacheEntriesExpired(DomainEvent):
    """A cleanup sweep removed expired entries."""
    count: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class CachePrefixCleared(DomainEvent):
    """All entries of one prefix were removed."""
    prefix: CachePrefix
    count: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class CacheCleared(DomainEvent):
    """The whole store was emptied and counters reset."""
    count: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class CacheFetchCompleted(DomainEvent):
    """get_or_fetch produced a value after a miss."""
    key: CacheKey
    latency_ms: float
    ttl: Optional[int] = None
    timestamp: float = field(default_factory=time.time)
