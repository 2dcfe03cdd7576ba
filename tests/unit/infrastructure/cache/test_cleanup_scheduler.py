import asyncio

import pytest
from unittest.mock import MagicMock

from docketcache.domain.interfaces.cache import CacheService
from docketcache.infrastructure.cache.caching_service import CachingServiceImpl
from docketcache.infrastructure.cache.cleanup_scheduler import (
    CacheCleanupScheduler, DEFAULT_CLEANUP_INTERVAL_SECONDS
)


def test_default_interval_is_one_minute(cache):
    assert CacheCleanupScheduler(cache).interval_seconds == DEFAULT_CLEANUP_INTERVAL_SECONDS == 60

@pytest.mark.parametrize("interval", [0, -1])
def test_invalid_interval_rejected(cache, interval):
    with pytest.raises(ValueError):
        CacheCleanupScheduler(cache, interval_seconds=interval)

def test_run_once_sweeps_expired_entries(cache: CachingServiceImpl, clock):
    cache.set('p', {'k': 1}, 'v', 10)
    cache.set('p', {'k': 2}, 'v', 10_000)
    clock.advance(100)
    scheduler = CacheCleanupScheduler(cache)

    assert scheduler.run_once() == 1
    assert scheduler.sweep_count == 1
    assert cache.get_stats()['size'] == 1

@pytest.mark.asyncio
async def test_periodic_sweeps_run_until_stopped():
    cache = MagicMock(spec=CacheService)
    cache.cleanup.return_value = 0
    scheduler = CacheCleanupScheduler(cache, interval_seconds=0.01)

    scheduler.start()
    assert scheduler.is_running
    await asyncio.sleep(0.1)
    await scheduler.stop()

    assert not scheduler.is_running
    assert cache.cleanup.call_count >= 2
    calls = cache.cleanup.call_count
    await asyncio.sleep(0.05)
    assert cache.cleanup.call_count == calls

@pytest.mark.asyncio
async def test_start_twice_keeps_single_task():
    cache = MagicMock(spec=CacheService)
    cache.cleanup.return_value = 0
    scheduler = CacheCleanupScheduler(cache, interval_seconds=10)

    scheduler.start()
    task = scheduler._task
    scheduler.start()

    assert scheduler._task is task
    await scheduler.stop()

@pytest.mark.asyncio
async def test_stop_without_start_is_noop(cache):
    scheduler = CacheCleanupScheduler(cache)
    await scheduler.stop()
    assert not scheduler.is_running

@pytest.mark.asyncio
async def test_failing_sweep_does_not_end_loop():
    cache = MagicMock(spec=CacheService)

    def sweep():
        if cache.cleanup.call_count == 1:
            raise RuntimeError("boom")
        return 0

    cache.cleanup.side_effect = sweep
    scheduler = CacheCleanupScheduler(cache, interval_seconds=0.01)

    scheduler.start()
    await asyncio.sleep(0.08)
    await scheduler.stop()

    assert cache.cleanup.call_count >= 2
