"""
Read-through helper shared by the catalog read endpoints.
"""
from typing import Any, Awaitable, Callable

from fastapi.responses import JSONResponse

from flowershop.cache import cache_manager


async def cached_json(
    key: str, fetch_func: Callable[[], Awaitable[Any]], ttl: int
) -> JSONResponse:
    """
    Serve a payload through the cache and mark the response HIT or MISS.

    Args:
        key: Cache key for this exact query shape
        fetch_func: Backing-store query run on a miss
        ttl: TTL for the stored payload

    Returns:
        JSONResponse carrying the payload unchanged
    """
    result = await cache_manager.get_or_fetch(key, fetch_func, ttl)

    return JSONResponse(
        content=result["data"],
        headers={
            "X-Cache": "HIT" if result["metadata"]["cached"] else "MISS",
            "X-Cache-Key": key,
        },
    )
