"""HTTP routers for the catalog API."""

from flowershop.routes.bouquets import router as bouquets_router
from flowershop.routes.cache import router as cache_router
from flowershop.routes.categories import router as categories_router
from flowershop.routes.colors import router as colors_router
from flowershop.routes.flowers import router as flowers_router
from flowershop.routes.tags import router as tags_router

routers = [
    bouquets_router,
    flowers_router,
    categories_router,
    tags_router,
    colors_router,
    cache_router,
]

__all__ = ["routers"]
