"""
Flowershop Catalog API - Main Entry Point

Configures logging and serves the FastAPI application with uvicorn.
"""
import os

import uvicorn

from flowershop.server import SERVER_VERSION, app
from flowershop.utils.logger import get_logger, setup_logging

# Initialize logger (reconfigured in main())
logger = get_logger(__name__)


def main() -> None:
    """
    Main entry point.

    Initializes:
        1. Structured logging
        2. The HTTP server (cache connection opens in the app lifespan)
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(level=log_level)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    logger.info(
        "server_starting",
        version=SERVER_VERSION,
        environment=os.getenv("ENVIRONMENT", "production"),
        log_level=log_level,
        host=host,
        port=port,
    )

    try:
        # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown
        uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
    except Exception as e:
        logger.error(
            "server_error",
            error=str(e),
            exc_info=True,
        )
        raise


if __name__ == "__main__":
    main()
