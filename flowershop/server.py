"""
FastAPI application initialization and configuration.

Sets up the catalog API with metadata, the cache connection lifecycle,
error handling, and the health check endpoint.
"""
import os
import traceback
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from flowershop.cache import cache
from flowershop.db.client import close_clients
from flowershop.db.exceptions import BackingStoreError
from flowershop.models.responses import ErrorResponse, HealthCheckResponse
from flowershop.routes import routers
from flowershop.utils.logger import get_logger, log_api_error

logger = get_logger(__name__)

# Server metadata
SERVER_NAME = "flowershop-catalog-api"
SERVER_VERSION = "1.0.0"
SERVER_DESCRIPTION = "Flower shop catalog API with a read-through Redis cache"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the cache connection on startup and release clients on shutdown."""
    cache_ready = await cache.initialize(self_test=True)
    logger.info("cache_startup_complete", available=cache_ready)

    yield

    await cache.close()
    await close_clients()
    logger.info("server_shutdown_complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured app with routers, error handling and health check

    Example:
        >>> app = create_app()
        >>> uvicorn.run(app, host="0.0.0.0", port=8000)
    """
    app = FastAPI(
        title=SERVER_NAME,
        version=SERVER_VERSION,
        description=SERVER_DESCRIPTION,
        lifespan=lifespan,
    )

    for router in routers:
        app.include_router(router)

    logger.info(
        "app_initialized",
        name=SERVER_NAME,
        version=SERVER_VERSION,
        routes=len(app.routes),
    )

    setup_error_handling(app)
    register_health_check(app)

    return app


def setup_error_handling(app: FastAPI) -> None:
    """
    Configure exception handlers for the application.

    Backing-store errors carry their own status code and message. Anything
    else becomes a generic 500 so internals never leak to clients.

    Args:
        app: FastAPI application to configure
    """

    @app.exception_handler(BackingStoreError)
    async def handle_backing_store_error(
        request: Request, error: BackingStoreError
    ) -> JSONResponse:
        if error.status_code >= 500:
            log_api_error(
                "BackingStore", request.method, request.url.path, error, code=error.code
            )
        else:
            logger.warning(
                "request_rejected",
                path=request.url.path,
                error_type=type(error).__name__,
                status_code=error.status_code,
                error_message=error.message,
            )

        return JSONResponse(
            status_code=error.status_code,
            content=ErrorResponse(error=error.message).model_dump(),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, error: Exception) -> JSONResponse:
        logger.error(
            "unexpected_error",
            path=request.url.path,
            error_type=type(error).__name__,
            error_message=str(error),
            environment=os.getenv("ENVIRONMENT", "production"),
            traceback=traceback.format_exc(),
        )

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error").model_dump(),
        )


def register_health_check(app: FastAPI) -> None:
    """
    Register the health check endpoint.

    Args:
        app: FastAPI application
    """

    @app.get("/health", response_model=HealthCheckResponse, tags=["health"])
    async def health_check() -> dict[str, Any]:
        """
        Report server health and component availability.

        The cache is optional: an unreachable cache degrades the service
        rather than making it unhealthy.
        """
        if not cache.is_available():
            cache_status = "disabled"
        elif await cache.ping():
            cache_status = "healthy"
        else:
            cache_status = "unhealthy"

        components = {
            "server": "healthy",
            "cache": cache_status,
        }

        if all(status == "healthy" for status in components.values()):
            overall_status = "healthy"
        elif components["server"] != "healthy":
            overall_status = "unhealthy"
        else:
            overall_status = "degraded"

        response = HealthCheckResponse(
            status=overall_status,
            version=SERVER_VERSION,
            components=components,
        )

        logger.debug("health_check_performed", status=overall_status)

        return response.model_dump()


# Global application instance
app = create_app()
