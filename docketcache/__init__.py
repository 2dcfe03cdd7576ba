"""docketcache: in-memory query-result cache with TTL expiry and FIFO eviction."""

__version__ = "0.1.0"
