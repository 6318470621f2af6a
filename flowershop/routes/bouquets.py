"""
Bouquet endpoints.

Reads are served through the cache with keys from the catalog key scheme.
Writes invalidate the bouquet's keys and every list family that could
embed it once the store call returns or raises, so a multi-step write that
fails after its first step still drops the stale entries.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from flowershop.auth import require_admin
from flowershop.cache import CacheKeyGenerator, CacheTTL, invalidate_entity
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.models.requests import BouquetCreate, BouquetListParams, BouquetUpdate
from flowershop.routes.cached import cached_json
from flowershop.utils.logger import get_logger, log_api_request, log_api_response

logger = get_logger(__name__)

COMPONENT = "BouquetsAPI"

router = APIRouter(prefix="/api/bouquets", tags=["bouquets"])


async def _list(params: BouquetListParams, repository: CatalogRepository) -> JSONResponse:
    start = log_api_request(COMPONENT, "GET", "/api/bouquets", **params.model_dump())

    cache_key = CacheKeyGenerator.list_key(
        "bouquet",
        featured=params.featured,
        category_id=params.category,
        limit=params.limit,
        with_related=params.with_flowers,
    )

    async def fetch_bouquets():
        return await repository.list_bouquets(params)

    response = await cached_json(cache_key, fetch_bouquets, CacheTTL.BOUQUET_LIST.value)

    log_api_response(
        COMPONENT,
        "GET",
        "/api/bouquets",
        200,
        start,
        cache=response.headers["X-Cache"],
    )
    return response


@router.get("")
async def list_bouquets(
    featured: bool = Query(False),
    category: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
    with_flowers: bool = Query(True, alias="withFlowers"),
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """
    List bouquets, optionally featured-only, by category, and limited.

    With withFlowers (the default) each bouquet embeds flowers, media,
    thumbnail and image.
    """
    params = BouquetListParams(
        featured=featured, category=category, limit=limit, with_flowers=with_flowers
    )
    return await _list(params, repository)


@router.get("/featured")
async def list_featured_bouquets(
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """Featured bouquets with flowers and media."""
    return await _list(BouquetListParams(featured=True), repository)


@router.get("/{bouquet_id}")
async def get_bouquet(
    bouquet_id: str,
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """Bouquet detail with flowers and media; 404 when it does not exist."""
    path = f"/api/bouquets/{bouquet_id}"
    start = log_api_request("BouquetDetailAPI", "GET", path)

    async def fetch_bouquet():
        return await repository.get_bouquet(bouquet_id)

    response = await cached_json(
        CacheKeyGenerator.detail("bouquet", bouquet_id),
        fetch_bouquet,
        CacheTTL.BOUQUET_DETAIL.value,
    )

    log_api_response("BouquetDetailAPI", "GET", path, 200, start)
    return response


@router.post("", status_code=201)
async def create_bouquet(
    payload: BouquetCreate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "POST", "/api/bouquets", admin_id=admin.get("id"))

    bouquet = None
    try:
        bouquet = await repository.create_bouquet(payload)
    finally:
        await invalidate_entity("bouquet", bouquet["id"] if bouquet else None)

    log_api_response(COMPONENT, "POST", "/api/bouquets", 201, start, bouquet_id=bouquet["id"])
    return JSONResponse(content=bouquet, status_code=201)


@router.put("/{bouquet_id}")
async def update_bouquet(
    bouquet_id: str,
    payload: BouquetUpdate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/bouquets/{bouquet_id}"
    start = log_api_request("BouquetDetailAPI", "PUT", path, admin_id=admin.get("id"))

    try:
        bouquet = await repository.update_bouquet(bouquet_id, payload)
    finally:
        await invalidate_entity("bouquet", bouquet_id)

    log_api_response("BouquetDetailAPI", "PUT", path, 200, start)
    return JSONResponse(content=bouquet)


@router.delete("/{bouquet_id}")
async def delete_bouquet(
    bouquet_id: str,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/bouquets/{bouquet_id}"
    start = log_api_request("BouquetDetailAPI", "DELETE", path, admin_id=admin.get("id"))

    try:
        await repository.delete_bouquet(bouquet_id)
    finally:
        await invalidate_entity("bouquet", bouquet_id)

    log_api_response("BouquetDetailAPI", "DELETE", path, 200, start)
    return JSONResponse(content={"success": True})
