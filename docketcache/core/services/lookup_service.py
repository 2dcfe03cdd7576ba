"""Simulated slow lookup used by the console to exercise get_or_fetch.

Stands in for the expensive external queries (case search, docket lookups)
whose results the application caches.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

class LookupService:
    """Produces a deterministic result for a prefix/params pair after a delay."""

    def __init__(self, delay_seconds: float = 0.25):
        self.delay_seconds = delay_seconds
        self.call_count = 0

    async def lookup(self, prefix: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Pretends to query a remote source."""
        self.call_count += 1
        logger.debug(f"Simulated lookup #{self.call_count} for '{prefix}' {dict(params or {})} (delay={self.delay_seconds}s)")
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        return {
            "source": prefix,
            "query": dict(params or {}),
            "fetched_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "lookup_number": self.call_count,
        }
