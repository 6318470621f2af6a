"""
Color endpoints.

Flower lists built with includeColors embed color rows, so color writes
also sweep the flower list family.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from flowershop.auth import require_admin
from flowershop.cache import CacheKeyGenerator, CacheTTL, invalidate_entity
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.models.requests import ColorCreate, ColorUpdate
from flowershop.routes.cached import cached_json
from flowershop.utils.logger import log_api_request, log_api_response

COMPONENT = "ColorsAPI"

router = APIRouter(prefix="/api/colors", tags=["colors"])


@router.get("")
async def list_colors(repository: CatalogRepository = Depends(get_repository)) -> JSONResponse:
    start = log_api_request(COMPONENT, "GET", "/api/colors")

    response = await cached_json(
        CacheKeyGenerator.list_key("color"), repository.list_colors, CacheTTL.COLOR_LIST.value
    )

    log_api_response(COMPONENT, "GET", "/api/colors", 200, start)
    return response


@router.get("/{color_id}")
async def get_color(
    color_id: str,
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """One color, cached under color:<id>; 404 when it does not exist."""
    path = f"/api/colors/{color_id}"
    start = log_api_request(COMPONENT, "GET", path)

    async def fetch_color():
        return await repository.get_color(color_id)

    response = await cached_json(
        CacheKeyGenerator.detail("color", color_id),
        fetch_color,
        CacheTTL.COLOR_DETAIL.value,
    )

    log_api_response(COMPONENT, "GET", path, 200, start)
    return response


@router.post("", status_code=201)
async def create_color(
    payload: ColorCreate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "POST", "/api/colors", admin_id=admin.get("id"))

    color = None
    try:
        color = await repository.create_color(payload)
    finally:
        await invalidate_entity("color", color["id"] if color else None)

    log_api_response(COMPONENT, "POST", "/api/colors", 201, start)
    return JSONResponse(content=color, status_code=201)


@router.put("/{color_id}")
async def update_color(
    color_id: str,
    payload: ColorUpdate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/colors/{color_id}"
    start = log_api_request(COMPONENT, "PUT", path, admin_id=admin.get("id"))

    try:
        color = await repository.update_color(color_id, payload)
    finally:
        await invalidate_entity("color", color_id)

    log_api_response(COMPONENT, "PUT", path, 200, start)
    return JSONResponse(content=color)


@router.delete("/{color_id}")
async def delete_color(
    color_id: str,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/colors/{color_id}"
    start = log_api_request(COMPONENT, "DELETE", path, admin_id=admin.get("id"))

    try:
        await repository.delete_color(color_id)
    finally:
        await invalidate_entity("color", color_id)

    log_api_response(COMPONENT, "DELETE", path, 200, start)
    return JSONResponse(content={"success": True})
