"""
Structured logging configuration using structlog.

Provides JSON-formatted logging with context processors for
request tracking, timestamps, and log levels, plus helpers for
logging API requests and responses in a uniform shape.
"""
import logging
import os
import sys
import time
from typing import Any

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured logging with structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Sets up:
        - JSON output format for production
        - Console output with colors for development
        - Context processors for timestamps and metadata
        - Integration with standard library logging
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    is_dev = os.getenv("ENVIRONMENT", "production") == "development"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("bouquets_requested", featured=True, limit=6)
    """
    return structlog.get_logger(name)


def log_api_request(
    component: str, method: str, path: str, **params: Any
) -> float:
    """
    Log an incoming API request and return its start time.

    Args:
        component: Logical API name (e.g. "BouquetsAPI")
        method: HTTP method
        path: Request path
        **params: Parsed query parameters or other request context

    Returns:
        Monotonic start time to pass to log_api_response()

    Example:
        >>> start = log_api_request("BouquetsAPI", "GET", "/api/bouquets", limit=6)
        >>> # ... handle request ...
        >>> log_api_response("BouquetsAPI", "GET", "/api/bouquets", 200, start)
    """
    get_logger("api").info(
        "api_request",
        component=component,
        method=method,
        path=path,
        **params,
    )
    return time.perf_counter()


def log_api_response(
    component: str,
    method: str,
    path: str,
    status_code: int,
    start_time: float,
    result_count: int | None = None,
    **extra: Any,
) -> None:
    """
    Log a completed API response with its duration.

    Args:
        component: Logical API name
        method: HTTP method
        path: Request path
        status_code: HTTP status code returned
        start_time: Value returned by log_api_request()
        result_count: Number of items in a list response, if any
        **extra: Additional context to log
    """
    duration_ms = (time.perf_counter() - start_time) * 1000

    get_logger("api").info(
        "api_response",
        component=component,
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration_ms, 2),
        result_count=result_count,
        **extra,
    )


def log_api_error(
    component: str,
    method: str,
    path: str,
    error: BaseException,
    **extra: Any,
) -> None:
    """Log a failed API call with the error type and message."""
    get_logger("api").error(
        "api_error",
        component=component,
        method=method,
        path=path,
        error=str(error),
        error_type=type(error).__name__,
        **extra,
    )
