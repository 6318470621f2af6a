"""Category endpoints, including the per-category bouquet list."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from flowershop.auth import require_admin
from flowershop.cache import CacheKeyGenerator, CacheTTL, invalidate_entity
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.models.requests import CategoryCreate, CategoryUpdate
from flowershop.routes.cached import cached_json
from flowershop.utils.logger import log_api_request, log_api_response

COMPONENT = "CategoriesAPI"

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("")
async def list_categories(
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "GET", "/api/categories")

    response = await cached_json(
        CacheKeyGenerator.list_key("category"),
        repository.list_categories,
        CacheTTL.CATEGORY_LIST.value,
    )

    log_api_response(COMPONENT, "GET", "/api/categories", 200, start)
    return response


@router.get("/{category_id}/bouquets")
async def list_category_bouquets(
    category_id: str,
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """In-stock bouquets of a category, cached under category:<id>:bouquets."""
    path = f"/api/categories/{category_id}/bouquets"
    start = log_api_request(COMPONENT, "GET", path)

    async def fetch_bouquets():
        return await repository.list_category_bouquets(category_id)

    response = await cached_json(
        CacheKeyGenerator.parent_scoped("category", category_id, "bouquet"),
        fetch_bouquets,
        CacheTTL.CATEGORY_BOUQUETS.value,
    )

    log_api_response(COMPONENT, "GET", path, 200, start)
    return response


@router.post("", status_code=201)
async def create_category(
    payload: CategoryCreate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "POST", "/api/categories", admin_id=admin.get("id"))

    category = None
    try:
        category = await repository.create_category(payload)
    finally:
        await invalidate_entity("category", category["id"] if category else None)

    log_api_response(COMPONENT, "POST", "/api/categories", 201, start)
    return JSONResponse(content=category, status_code=201)


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/categories/{category_id}"
    start = log_api_request(COMPONENT, "PUT", path, admin_id=admin.get("id"))

    try:
        category = await repository.update_category(category_id, payload)
    finally:
        await invalidate_entity("category", category_id)

    log_api_response(COMPONENT, "PUT", path, 200, start)
    return JSONResponse(content=category)


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/categories/{category_id}"
    start = log_api_request(COMPONENT, "DELETE", path, admin_id=admin.get("id"))

    try:
        await repository.delete_category(category_id)
    finally:
        await invalidate_entity("category", category_id)

    log_api_response(COMPONENT, "DELETE", path, 200, start)
    return JSONResponse(content={"success": True})
