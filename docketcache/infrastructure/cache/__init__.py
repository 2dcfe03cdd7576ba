"""Caching Service Implementation.

Provides the concrete implementation of the CacheService interface: an
in-memory store with per-entry TTL, FIFO eviction at capacity and hit/miss
statistics, plus a periodic cleanup scheduler.
Bounded Context: Cache Management
"""
