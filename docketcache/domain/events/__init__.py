"""Domain Event definitions.

Represents significant occurrences within the cache that observers
might react to (hits, misses, evictions, sweeps).
"""
