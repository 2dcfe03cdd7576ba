"""Periodic sweep of expired cache entries.

Runs as an asyncio task on the caller's event loop, so a sweep never
interleaves with a synchronous cache operation.
"""

import asyncio
import logging
from typing import Optional

from docketcache.domain.interfaces.cache import CacheService

logger = logging.getLogger(__name__)

DEFAULT_CLEANUP_INTERVAL_SECONDS = 60.0

class CacheCleanupScheduler:
    """Calls `cleanup()` on a cache at a fixed interval."""

    def __init__(self, cache: CacheService, interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS):
        """Initializes the scheduler without starting it.

        Args:
            cache: The cache to sweep.
            interval_seconds: Delay between sweeps.
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self.sweep_count = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> int:
        """Sweeps immediately. Returns the number of entries removed."""
        removed = self.cache.cleanup()
        self.sweep_count += 1
        if removed:
            logger.info(f"Cache cleanup sweep #{self.sweep_count} removed {removed} expired entries.")
        else:
            logger.debug(f"Cache cleanup sweep #{self.sweep_count}: nothing expired.")
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception as e:
                logger.error(f"Cache cleanup sweep failed: {e}", exc_info=True)

    def start(self) -> None:
        """Starts the sweep loop on the running event loop. No-op if already running."""
        if self.is_running:
            logger.debug("Cache cleanup scheduler already running.")
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Cache cleanup scheduler started (interval={self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancels the sweep loop and waits for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Cache cleanup scheduler stopped.")
