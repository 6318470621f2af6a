"""
Async client for the hosted Supabase backing store.

Talks to the PostgREST (/rest/v1) and GoTrue (/auth/v1) REST surfaces with
httpx. Two clients exist per process: one with the anon key for catalog
reads and one with the service-role key for admin writes.
"""

import os
from typing import Any, Dict, Iterable, List, Optional

import httpx

from flowershop.db.exceptions import (
    AuthenticationError,
    BackingStoreError,
    NotFoundError,
    ValidationError,
)
from flowershop.db.query_logging import logged_query
from flowershop.utils.logger import get_logger

logger = get_logger("db.client")

SINGLE_OBJECT = "application/vnd.pgrst.object+json"
NO_ROWS_CODE = "PGRST116"

# Postgres SQLSTATE classes for rejected input: data exception, constraint violation
INVALID_INPUT_CLASSES = ("22", "23")


class Op:
    """An explicit PostgREST filter operator, e.g. in.(a,b)."""

    def __init__(self, operator: str, operand: str) -> None:
        self.operator = operator
        self.operand = operand

    def __str__(self) -> str:
        return f"{self.operator}.{self.operand}"


def in_(values: Iterable[Any]) -> Op:
    """Build an `in` filter from a collection of ids."""
    return Op("in", "(" + ",".join(str(v) for v in values) + ")")


def _encode_filter(value: Any) -> str:
    if isinstance(value, Op):
        return str(value)
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    if value is None:
        return "is.null"
    return f"eq.{value}"


class SupabaseClient:
    """
    Lightweight async client for the Supabase REST API.

    Raises BackingStoreError subclasses for every failure; nothing is
    swallowed here.

    Example:
        >>> db = SupabaseClient(url, anon_key)
        >>> rows = await db.select("bouquets", filters={"featured": True})
    """

    def __init__(self, url: str, key: str, timeout: float = 30.0) -> None:
        self.url = url.rstrip("/")
        self.key = key
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        self.client = httpx.AsyncClient(
            base_url=self.url, headers=self.headers, timeout=timeout
        )

    def _raise_for_response(
        self, response: httpx.Response, table: str, single: bool = False
    ) -> None:
        if response.is_success:
            return

        try:
            body = response.json()
        except ValueError:
            body = {}

        code = body.get("code") if isinstance(body, dict) else None
        message = (
            body.get("message") if isinstance(body, dict) else None
        ) or response.text or f"HTTP {response.status_code}"

        if single and (code == NO_ROWS_CODE or response.status_code == 406):
            raise NotFoundError(table, "requested", message=message)

        if code and code[:2] in INVALID_INPUT_CLASSES:
            raise ValidationError(message, code=code)

        raise BackingStoreError(message, status_code=500, code=code)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise BackingStoreError(f"Backing store unreachable: {e}") from e

    @logged_query("select")
    async def select(
        self,
        table: str,
        select: str = "*",
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
        single: bool = False,
    ) -> Any:
        """
        Query a table.

        Args:
            table: Table name
            select: PostgREST select expression (may embed relations)
            filters: Column -> value (equality) or Op
            order: Order expression (e.g. "name.asc")
            limit: Maximum rows
            single: Expect exactly one row and return it as a dict

        Returns:
            List of rows, or one row when single=True

        Raises:
            NotFoundError: single=True and no row matched
            BackingStoreError: Any other failure
        """
        params: Dict[str, str] = {"select": select}
        for column, value in (filters or {}).items():
            params[column] = _encode_filter(value)
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)

        headers = {"Accept": SINGLE_OBJECT} if single else None
        response = await self._request(
            "GET", f"/rest/v1/{table}", params=params, headers=headers
        )
        self._raise_for_response(response, table, single=single)
        return response.json()

    @logged_query("insert")
    async def insert(
        self, table: str, rows: List[Dict[str, Any]], single: bool = False
    ) -> Any:
        """Insert rows and return the stored representation."""
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = SINGLE_OBJECT
        response = await self._request(
            "POST", f"/rest/v1/{table}", json=rows, headers=headers
        )
        self._raise_for_response(response, table, single=single)
        return response.json()

    @logged_query("update")
    async def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Dict[str, Any],
        single: bool = False,
    ) -> Any:
        """Update matching rows and return their new representation."""
        headers = {"Prefer": "return=representation"}
        if single:
            headers["Accept"] = SINGLE_OBJECT
        params = {column: _encode_filter(value) for column, value in filters.items()}
        response = await self._request(
            "PATCH", f"/rest/v1/{table}", json=values, params=params, headers=headers
        )
        self._raise_for_response(response, table, single=single)
        return response.json()

    @logged_query("delete")
    async def delete(self, table: str, filters: Dict[str, Any]) -> None:
        """Delete matching rows."""
        if not filters:
            raise BackingStoreError(f"Refusing unfiltered delete on {table}")
        params = {column: _encode_filter(value) for column, value in filters.items()}
        response = await self._request("DELETE", f"/rest/v1/{table}", params=params)
        self._raise_for_response(response, table)

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """
        Resolve a session access token to its auth user.

        Raises:
            AuthenticationError: Token missing, expired or invalid
        """
        response = await self._request(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if response.status_code in (401, 403):
            raise AuthenticationError()
        self._raise_for_response(response, "auth.users")
        return response.json()

    async def close(self) -> None:
        await self.client.aclose()


_clients: Dict[str, SupabaseClient] = {}


def _get_client(role: str, key_env: str) -> SupabaseClient:
    if role not in _clients:
        url = os.getenv("SUPABASE_URL")
        key = os.getenv(key_env)
        if not url or not key:
            logger.error("supabase_not_configured", role=role, key_env=key_env)
            raise BackingStoreError(f"SUPABASE_URL and {key_env} are required")
        _clients[role] = SupabaseClient(url, key)
        logger.info("supabase_client_initialized", role=role)
    return _clients[role]


def get_supabase() -> SupabaseClient:
    """Client authenticated with the anon key (catalog reads)."""
    return _get_client("anon", "SUPABASE_ANON_KEY")


def get_admin_supabase() -> SupabaseClient:
    """Client authenticated with the service-role key (admin writes)."""
    return _get_client("service_role", "SUPABASE_SERVICE_ROLE_KEY")


async def close_clients() -> None:
    """Close every client opened by this process."""
    for client in list(_clients.values()):
        await client.close()
    _clients.clear()
