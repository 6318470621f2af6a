"""Tag endpoints, including the per-bouquet tag list."""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from flowershop.auth import require_admin
from flowershop.cache import CacheKeyGenerator, CacheTTL, invalidate_entity
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.models.requests import TagCreate, TagUpdate
from flowershop.routes.cached import cached_json
from flowershop.utils.logger import log_api_request, log_api_response

COMPONENT = "TagsAPI"

router = APIRouter(prefix="/api/tags", tags=["tags"])


@router.get("")
async def list_tags(repository: CatalogRepository = Depends(get_repository)) -> JSONResponse:
    start = log_api_request(COMPONENT, "GET", "/api/tags")

    response = await cached_json(
        CacheKeyGenerator.list_key("tag"), repository.list_tags, CacheTTL.TAG_LIST.value
    )

    log_api_response(COMPONENT, "GET", "/api/tags", 200, start)
    return response


@router.get("/bouquet/{bouquet_id}")
async def list_bouquet_tags(
    bouquet_id: str,
    repository: CatalogRepository = Depends(get_repository),
) -> JSONResponse:
    """Tags of one bouquet, cached under bouquet:<id>:tags."""
    path = f"/api/tags/bouquet/{bouquet_id}"
    start = log_api_request(COMPONENT, "GET", path)

    async def fetch_tags():
        return await repository.get_bouquet_tags(bouquet_id)

    response = await cached_json(
        CacheKeyGenerator.sub_resource("bouquet", bouquet_id, "tags"),
        fetch_tags,
        CacheTTL.BOUQUET_TAGS.value,
    )

    log_api_response(COMPONENT, "GET", path, 200, start)
    return response


@router.post("", status_code=201)
async def create_tag(
    payload: TagCreate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    start = log_api_request(COMPONENT, "POST", "/api/tags", admin_id=admin.get("id"))

    tag = None
    try:
        tag = await repository.create_tag(payload)
    finally:
        await invalidate_entity("tag", tag["id"] if tag else None)

    log_api_response(COMPONENT, "POST", "/api/tags", 201, start)
    return JSONResponse(content=tag, status_code=201)


@router.put("/{tag_id}")
async def update_tag(
    tag_id: str,
    payload: TagUpdate,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/tags/{tag_id}"
    start = log_api_request(COMPONENT, "PUT", path, admin_id=admin.get("id"))

    try:
        tag = await repository.update_tag(tag_id, payload)
    finally:
        await invalidate_entity("tag", tag_id)

    log_api_response(COMPONENT, "PUT", path, 200, start)
    return JSONResponse(content=tag)


@router.delete("/{tag_id}")
async def delete_tag(
    tag_id: str,
    repository: CatalogRepository = Depends(get_repository),
    admin: dict = Depends(require_admin),
) -> JSONResponse:
    path = f"/api/tags/{tag_id}"
    start = log_api_request(COMPONENT, "DELETE", path, admin_id=admin.get("id"))

    try:
        await repository.delete_tag(tag_id)
    finally:
        await invalidate_entity("tag", tag_id)

    log_api_response(COMPONENT, "DELETE", path, 200, start)
    return JSONResponse(content={"success": True})
