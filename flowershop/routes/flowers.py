"""
Flower endpoints.

Bouquet projections embed flower summaries, so flower writes also sweep
the bouquet list and detail families.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from flowershop.auth import require_admin
from flowershop.cache import CacheKeyGenerator, CacheTTL, invalidate_entity
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.models.requests import FlowerCreate, FlowerUpdate
from flowershop.routes.cached import cached_json
from flowershop.utils.logger import log_api_request, log_api_response

COMPONENT = "FlowersAPI"

router = APIRouter(prefix="/api/flowers", tags=["flowers"])


@router.get("")
async def list_flowers(
    include_colors: bool = Query(False, alias="includeColors"),
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "GET", "/api/flowers", include_colors=include_colors)

    async def fetch_flowers():
        return await repository.list_flowers(include_colors=include_colors)

    response = await cached_json(
        CacheKeyGenerator.list_key("flower", with_related=include_colors),
        fetch_flowers,
        CacheTTL.FLOWER_LIST.value,
    )

    log_api_response(COMPONENT, "GET", "/api/flowers", 200, start)
    return response


@router.post("", status_code=201)
async def create_flower(
    payload: FlowerCreate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "POST", "/api/flowers", admin_id=admin.get("id"))

    flower = None
    try:
        flower = await repository.create_flower(payload)
    finally:
        await invalidate_entity("flower", flower["id"] if flower else None)

    log_api_response(COMPONENT, "POST", "/api/flowers", 201, start)
    return JSONResponse(content=flower, status_code=201)


@router.put("/{flower_id}")
async def update_flower(
    flower_id: str,
    payload: FlowerUpdate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/flowers/{flower_id}"
    start = log_api_request(COMPONENT, "PUT", path, admin_id=admin.get("id"))

    try:
        flower = await repository.update_flower(flower_id, payload)
    finally:
        await invalidate_entity("flower", flower_id)

    log_api_response(COMPONENT, "PUT", path, 200, start)
    return JSONResponse(content=flower)


@router.delete("/{flower_id}")
async def delete_flower(
    flower_id: str,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/flowers/{flower_id}"
    start = log_api_request(COMPONENT, "DELETE", path, admin_id=admin.get("id"))

    try:
        await repository.delete_flower(flower_id)
    finally:
        await invalidate_entity("flower", flower_id)

    log_api_response(COMPONENT, "DELETE", path, 200, start)
    return JSONResponse(content={"success": True})
