"""Defines common Value Objects used across different domain contexts.

These objects represent simple values like cache keys, prefixes and
lookup parameters, ensuring consistency and type safety.
"""

from typing import NewType, Any, Dict, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are plain types at runtime.
PromptText = NewType("PromptText", str)        # Raw line typed at the console
ProcessedOutput = NewType("ProcessedOutput", str) # Text rendered back to the user

# === Caching Context ===
CacheKey = NewType("CacheKey", str)              # Unique key for a cache entry
CachePrefix = NewType("CachePrefix", str)        # Namespace for cache keys (e.g., 'search', 'case')
CacheParams = NewType("CacheParams", Dict[str, Any]) # Parameters identifying one query within a prefix
                                                     # Example: {'q': 'brown', 'court': 'scotus'}

# --- Structured Data ---
class CacheStats(TypedDict):
    """Snapshot of cache counters and size."""
    hits: int
    misses: int
    size: int
    hit_rate: float # Percentage rounded to two decimals
