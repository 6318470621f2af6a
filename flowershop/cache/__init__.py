"""Redis caching layer for catalog API responses.

This package provides Redis-based read-through caching with:
- Connection pooling and explicit startup (RedisCache)
- Cache key generation (CacheKeyGenerator)
- TTL policies (CacheTTL)
- Cache operations and invalidation (CacheManager)
- Mutation-driven invalidation sweeps (invalidate_entity)
- Graceful fail-open behavior
"""

from flowershop.cache.connection import RedisCache, cache, resolve_redis_url
from flowershop.cache.invalidation import build_plan, invalidate_entity
from flowershop.cache.keys import CacheKeyGenerator, key_generator
from flowershop.cache.manager import CacheManager, cache_manager
from flowershop.cache.ttl import CacheTTL

__all__ = [
    # Connection
    "RedisCache",
    "cache",
    "resolve_redis_url",
    # Key generation
    "CacheKeyGenerator",
    "key_generator",
    # Cache manager
    "CacheManager",
    "cache_manager",
    # Invalidation
    "build_plan",
    "invalidate_entity",
    # TTL policies
    "CacheTTL",
]
