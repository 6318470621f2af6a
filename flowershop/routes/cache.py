"""
Admin bulk cache invalidation.

Operational recovery endpoint: deletes arbitrary keys and key patterns.
Authorization is checked before the cache is touched.
"""
from fastapi import APIRouter, Depends

from flowershop.auth import require_admin
from flowershop.cache import cache_manager
from flowershop.models.requests import CacheInvalidateRequest
from flowershop.models.responses import CacheInvalidateResponse, InvalidationResult
from flowershop.utils.logger import log_api_request, log_api_response

COMPONENT = "CacheInvalidationAPI"

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.post("/invalidate", response_model=CacheInvalidateResponse, response_model_exclude_none=True)
async def invalidate_cache(
    payload: CacheInvalidateRequest,
    admin: dict = Depends(require_admin),
) -> CacheInvalidateResponse:
    """
    Delete the given keys and every key matching the given patterns.

    Returns one "keys" entry with the number of keys requested, and one
    "pattern" entry per pattern with the number of keys it deleted.
    """
    start = log_api_request(
        COMPONENT,
        "POST",
        "/api/cache/invalidate",
        admin_id=admin.get("id"),
        keys=len(payload.keys or []),
        patterns=len(payload.patterns or []),
    )

    results = []

    if payload.keys:
        await cache_manager.invalidate_keys(payload.keys)
        results.append(InvalidationResult(type="keys", count=len(payload.keys)))

    for pattern in payload.patterns or []:
        deleted = await cache_manager.invalidate_pattern(pattern)
        results.append(InvalidationResult(type="pattern", pattern=pattern, count=deleted))

    log_api_response(
        COMPONENT, "POST", "/api/cache/invalidate", 200, start, result_count=len(results)
    )

    return CacheInvalidateResponse(success=True, results=results)
