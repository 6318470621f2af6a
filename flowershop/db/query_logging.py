"""
Query logging for backing-store calls.

logged_query is applied explicitly to each client method that talks to
the store, so every query is timed and logged without intercepting the
client at runtime.
"""

import functools
import time
from typing import Any, Awaitable, Callable, TypeVar

from flowershop.utils.logger import get_logger

logger = get_logger("db.query")

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def logged_query(operation: str) -> Callable[[F], F]:
    """
    Decorate an async client method taking the table name first.

    Args:
        operation: Operation label (select, insert, update, delete, ...)

    Example:
        >>> class Client:
        ...     @logged_query("select")
        ...     async def select(self, table, **kwargs): ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self, table: str, *args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                result = await func(self, table, *args, **kwargs)
            except Exception as e:
                logger.error(
                    "db_query_failed",
                    operation=operation,
                    table=table,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            logger.debug(
                "db_query",
                operation=operation,
                table=table,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
                rows=len(result) if isinstance(result, list) else None,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator
