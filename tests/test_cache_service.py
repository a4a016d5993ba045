"""
Tests for the cache service (memory and Redis backends)
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from app.services.cache_service import CacheService


class Ticker:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_memory_cache_respects_ttl():
    clock = Ticker()
    cache = CacheService(clock=clock)

    await cache.set("genres:en-US", "payload", ttl_seconds=60)
    clock.now += 59
    assert await cache.get("genres:en-US") == "payload"

    clock.now += 1
    assert await cache.get("genres:en-US") is None


@pytest.mark.asyncio
async def test_memory_cache_delete():
    cache = CacheService()
    await cache.set("k", "v")
    await cache.delete("k")
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_redis_calls_are_awaited():
    """Async Redis methods must be awaited, not called synchronously."""
    redis = MagicMock()
    redis.get = AsyncMock(return_value="cached")
    redis.setex = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.aclose = AsyncMock()

    cache = CacheService(redis_client=redis)

    assert await cache.get("k") == "cached"
    await cache.set("k", "v", ttl_seconds=86400)
    await cache.delete("k")
    await cache.close()

    redis.get.assert_awaited_once_with("k")
    redis.setex.assert_awaited_once_with("k", 86400, "v")
    redis.delete.assert_awaited_once_with("k")
    redis.aclose.assert_awaited_once()


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_memory():
    redis = MagicMock()
    redis.get = AsyncMock(side_effect=ConnectionError("down"))
    redis.setex = AsyncMock(side_effect=ConnectionError("down"))

    cache = CacheService(redis_client=redis)

    assert await cache.set("k", "v") is True
    assert await cache.get("k") == "v"
