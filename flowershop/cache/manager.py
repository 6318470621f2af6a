"""Cache manager for Redis operations with fail-open error handling.

This module provides the CacheManager class which implements the
read-through pattern and key/pattern invalidation with graceful
degradation when Redis is unavailable. No method raises a cache fault to
its caller: reads degrade to a miss, writes and deletes to a logged no-op.
"""

import asyncio
import json
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

import structlog

from flowershop.cache.connection import RedisCache, cache

logger = structlog.get_logger(__name__)

JSONValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]
T = TypeVar("T", bound=JSONValue)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class CacheManager:
    """
    Main cache operations manager with fail-open behavior.

    Values are stored as a JSON envelope {"data", "cached_at", "ttl"};
    callers only ever see "data". Entries are never updated in place:
    staleness is resolved by deleting the key and letting the next read
    repopulate it.

    Attributes:
        connection: RedisCache holding the (possibly absent) client
    """

    def __init__(self, connection: RedisCache = cache) -> None:
        self.connection = connection

    @property
    def redis(self):
        return self.connection.client

    async def get_entry(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve the stored envelope for a key.

        Args:
            key: Cache key to retrieve

        Returns:
            Envelope dictionary with an added "age_seconds", or None on miss
            or on any fault
        """
        if not self.redis:
            logger.debug("cache_get_skipped", reason="redis_not_available", key=key)
            return None

        start = time.perf_counter()

        try:
            value = await self.redis.get(key)

            if value is None:
                logger.info("cache_miss", key=key, duration_ms=_elapsed_ms(start))
                return None

            entry = json.loads(value)

            cached_at = datetime.fromisoformat(entry["cached_at"])
            age_seconds = max(
                0, int((datetime.now(timezone.utc) - cached_at).total_seconds())
            )
            entry["age_seconds"] = age_seconds

            logger.info(
                "cache_hit",
                key=key,
                age_seconds=age_seconds,
                ttl=entry.get("ttl"),
                duration_ms=_elapsed_ms(start),
            )

            return entry

        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(
                "cache_get_decode_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            # Unreadable entry; drop it so the next read repopulates
            await self.invalidate_key(key)
            return None

        except Exception as e:
            logger.error(
                "cache_get_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def get(self, key: str) -> Optional[T]:
        """
        Retrieve a cached value by key.

        Args:
            key: Cache key to retrieve

        Returns:
            The cached payload (possibly an empty list), or None on miss

        Example:
            >>> manager = CacheManager()
            >>> bouquets = await manager.get("featured:bouquets:with-flowers")
        """
        entry = await self.get_entry(key)
        if entry is None:
            return None
        return entry.get("data")

    async def set(self, key: str, value: T, ttl: int) -> bool:
        """
        Store value in cache with TTL.

        Args:
            key: Cache key
            value: Data to cache (must be JSON-serializable)
            ttl: Time to live in seconds

        Returns:
            True if cached successfully, False otherwise
        """
        if not self.redis:
            logger.debug("cache_set_skipped", reason="redis_not_available", key=key)
            return False

        start = time.perf_counter()

        try:
            payload = json.dumps(
                {
                    "data": value,
                    "cached_at": datetime.now(timezone.utc).isoformat(),
                    "ttl": ttl,
                }
            )

            await self.redis.set(key, payload, ex=ttl)

            logger.info(
                "cache_set",
                key=key,
                ttl=ttl,
                data_size=len(payload),
                duration_ms=_elapsed_ms(start),
            )

            return True

        except (TypeError, ValueError) as e:
            logger.error(
                "cache_set_serialization_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        except Exception as e:
            logger.error(
                "cache_set_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def invalidate_key(self, key: str) -> bool:
        """
        Delete a single cached key.

        Args:
            key: Cache key to delete

        Returns:
            True if the key existed and was deleted, False otherwise
        """
        if not self.redis:
            logger.debug("cache_delete_skipped", reason="redis_not_available", key=key)
            return False

        start = time.perf_counter()

        try:
            result = await self.redis.delete(key)
            logger.info(
                "cache_invalidate",
                key=key,
                existed=result == 1,
                duration_ms=_elapsed_ms(start),
            )
            return result == 1

        except Exception as e:
            logger.error(
                "cache_delete_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def _delete_each(self, keys: List[str]) -> int:
        # One DEL per key; the hosted store rejects multi-key DEL
        results = await asyncio.gather(*(self.redis.delete(key) for key in keys))
        return sum(1 for result in results if result == 1)

    async def invalidate_keys(self, keys: List[str]) -> int:
        """
        Delete several keys, one DEL command per key.

        Args:
            keys: Cache keys to delete

        Returns:
            Number of keys that existed and were deleted
        """
        if not keys:
            return 0

        if not self.redis:
            logger.debug(
                "cache_delete_multi_skipped",
                reason="redis_not_available",
                key_count=len(keys),
            )
            return 0

        start = time.perf_counter()

        try:
            deleted = await self._delete_each(keys)
            logger.info(
                "cache_invalidate_multiple",
                requested=len(keys),
                deleted=deleted,
                duration_ms=_elapsed_ms(start),
            )
            return deleted

        except Exception as e:
            logger.error(
                "cache_delete_multi_error",
                key_count=len(keys),
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

    async def invalidate_pattern(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern.

        Lists matches with KEYS, then deletes them one by one. This is O(N)
        in matching keys and not atomic: a key written between the listing
        and the deletes survives.

        Args:
            pattern: Glob pattern (e.g. "bouquets:list*")

        Returns:
            Number of keys deleted
        """
        if not self.redis:
            logger.debug(
                "cache_delete_pattern_skipped",
                reason="redis_not_available",
                pattern=pattern,
            )
            return 0

        start = time.perf_counter()

        try:
            keys = await self.redis.keys(pattern)
            deleted = await self._delete_each(list(keys)) if keys else 0

            logger.info(
                "cache_invalidate_pattern",
                pattern=pattern,
                matched=len(keys),
                deleted=deleted,
                duration_ms=_elapsed_ms(start),
            )
            return deleted

        except Exception as e:
            logger.error(
                "cache_delete_pattern_error",
                pattern=pattern,
                error=str(e),
                error_type=type(e).__name__,
            )
            return 0

    async def get_or_fetch(
        self, key: str, fetch_func: Callable[[], Awaitable[T]], ttl: int
    ) -> Dict[str, Any]:
        """
        Get from cache or fetch and cache (read-through).

        A hit is any stored value, including an empty list; its contents
        are returned as stored. On a miss the fetch function runs and its
        complete result is cached. Fetch errors propagate and nothing is
        cached.

        Args:
            key: Cache key
            fetch_func: Async function to fetch data if cache miss
            ttl: Time to live in seconds

        Returns:
            Dictionary with structure:
                {
                    "data": <actual data>,
                    "metadata": {
                        "cached": bool,
                        "cache_age_seconds": int,
                        "ttl": int
                    }
                }

        Example:
            >>> async def fetch_bouquets():
            ...     return await repository.list_bouquets(params)
            >>>
            >>> result = await cache_manager.get_or_fetch(
            ...     "bouquets:list:with-flowers", fetch_bouquets, ttl=3600
            ... )
            >>> print(f"Cached: {result['metadata']['cached']}")
        """
        cached = await self.get_entry(key)

        if cached is not None:
            return {
                "data": cached.get("data"),
                "metadata": {
                    "cached": True,
                    "cache_age_seconds": cached.get("age_seconds", 0),
                    "ttl": cached.get("ttl", ttl),
                },
            }

        logger.debug("cache_miss_fetching", key=key)

        try:
            data = await fetch_func()

        except Exception as e:
            logger.error(
                "fetch_function_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        await self.set(key, data, ttl)

        return {
            "data": data,
            "metadata": {
                "cached": False,
                "cache_age_seconds": 0,
                "ttl": ttl,
            },
        }


# Global cache manager instance bound to the process-wide connection
cache_manager = CacheManager()
