"""
Cache Service

Small key/value cache with per-key TTL, used for the genre taxonomy.
Backed by Redis when REDIS_URL is configured, otherwise by an in-process
dict. Both are reached through the same `get` / `set` / `delete` interface,
so callers (and tests) can inject either one.
"""

import time
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis

from ..config import get_settings
from ..core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Redis client singleton
_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Get or create the Redis client (None when Redis is not configured)."""
    global _redis_client

    if _redis_client is not None:
        return _redis_client

    if not settings.redis_url:
        logger.debug("redis_not_configured")
        return None

    try:
        _redis_client = redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )
        logger.info("redis_client_created")
        return _redis_client
    except ValueError as e:
        logger.warning("redis_url_invalid", error=str(e))
        return None


class CacheService:
    """
    TTL cache with an optional Redis backend.

    Falls back to the in-memory store whenever Redis is unavailable or a
    Redis call fails. The in-memory store enforces TTLs against `clock`
    (seconds, `time.time` by default).
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.redis = redis_client
        self._clock = clock
        self._memory_cache: Dict[str, Tuple[str, float]] = {}

    def _is_available(self) -> bool:
        return self.redis is not None

    async def get(self, key: str) -> Optional[str]:
        """Get value from cache, or None if missing or expired."""
        if self._is_available():
            try:
                return await self.redis.get(key)
            except Exception as e:
                logger.warning("cache_get_failed", key=key, error=str(e))

        entry = self._memory_cache.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            self._memory_cache.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: int = 300) -> bool:
        """Set value in cache with TTL."""
        if self._is_available():
            try:
                await self.redis.setex(key, ttl_seconds, value)
                return True
            except Exception as e:
                logger.warning("cache_set_failed", key=key, error=str(e))

        self._memory_cache[key] = (value, self._clock() + ttl_seconds)
        return True

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if self._is_available():
            try:
                await self.redis.delete(key)
            except Exception as e:
                logger.warning("cache_delete_failed", key=key, error=str(e))

        self._memory_cache.pop(key, None)
        return True

    async def close(self):
        if self._is_available():
            await self.redis.aclose()


# Singleton instance
_cache_service: Optional[CacheService] = None


def get_cache_service() -> CacheService:
    """Get singleton CacheService instance."""
    global _cache_service
    if _cache_service is None:
        _cache_service = CacheService(redis_client=get_redis_client())
    return _cache_service
