"""Deterministic cache key derivation.

Keys look like `prefix:a=1&b="x"`: parameter names sorted, values JSON
encoded compactly so that equal parameter sets always map to the same key.
"""

import json
import logging
from typing import Any, Mapping, Optional

from docketcache.domain.interfaces.cache import CacheKeyError
from docketcache.domain.models.common import CacheKey

logger = logging.getLogger(__name__)

KEY_SEPARATOR = ":"
PAIR_SEPARATOR = "&"

def encode_value(value: Any) -> str:
    """JSON-encodes a parameter value the way a browser's JSON.stringify would.

    NaN and infinities have no JSON form and are rejected with ValueError.
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)

def generate_key(prefix: str, params: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Builds the cache key for a prefix and its parameters.

    Args:
        prefix: Namespace for the key.
        params: Parameter name to value. None or empty yields `prefix:`.

    Returns:
        The cache key.

    Raises:
        CacheKeyError: If a value is not JSON serializable (e.g., contains a cycle).
    """
    if not params:
        return CacheKey(f"{prefix}{KEY_SEPARATOR}")

    pairs = []
    for name in sorted(params):
        try:
            pairs.append(f"{name}={encode_value(params[name])}")
        except (TypeError, ValueError) as e:
            logger.debug(f"Cannot serialize cache param '{name}' for prefix '{prefix}': {e}")
            raise CacheKeyError(f"Parameter '{name}' for prefix '{prefix}' is not serializable: {e}") from e
    return CacheKey(f"{prefix}{KEY_SEPARATOR}{PAIR_SEPARATOR.join(pairs)}")

def prefix_marker(prefix: str) -> str:
    """Returns the leading text shared by every key under `prefix`."""
    return f"{prefix}{KEY_SEPARATOR}"
