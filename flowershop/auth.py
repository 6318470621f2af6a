"""
Admin session verification.

A session is the Supabase access token sent as a bearer token or in the
sb-access-token cookie. It is verified against Supabase Auth and the
user's role is read from the profiles table.
"""
from typing import Any, Dict, Optional

from fastapi import Request

from flowershop.db.client import get_admin_supabase, get_supabase
from flowershop.db.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackingStoreError,
)
from flowershop.utils.logger import get_logger

logger = get_logger(__name__)

SESSION_COOKIE = "sb-access-token"
ADMIN_ROLE = "admin"


def extract_access_token(request: Request) -> Optional[str]:
    """Read the session token from the Authorization header or cookie."""
    authorization = request.headers.get("authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()

    return request.cookies.get(SESSION_COOKIE) or None


async def require_admin(request: Request) -> Dict[str, Any]:
    """
    FastAPI dependency admitting only admin sessions.

    Returns:
        The authenticated auth user

    Raises:
        AuthenticationError: No session, or the session is invalid (401)
        AuthorizationError: Role lookup failed or role is not admin (403)
    """
    token = extract_access_token(request)
    if not token:
        raise AuthenticationError()

    try:
        user = await get_supabase().get_user(token)
    except AuthenticationError:
        logger.warning("admin_session_rejected", reason="invalid_token")
        raise
    except BackingStoreError as e:
        logger.error("admin_session_lookup_failed", error=str(e))
        raise AuthenticationError() from e

    user_id = user.get("id")
    if not user_id:
        raise AuthenticationError()

    try:
        profile = await get_admin_supabase().select(
            "profiles", select="role", filters={"id": user_id}, single=True
        )
    except BackingStoreError as e:
        logger.warning("admin_profile_lookup_failed", user_id=user_id, error=str(e))
        raise AuthorizationError() from e

    if profile.get("role") != ADMIN_ROLE:
        logger.warning("admin_access_denied", user_id=user_id, role=profile.get("role"))
        raise AuthorizationError()

    return user
