"""
Backing-store integration for the hosted Supabase platform.

This module provides:
- SupabaseClient: async PostgREST/GoTrue client
- Exception hierarchy mapped to HTTP status codes
- Explicit query logging (logged_query)
"""

from flowershop.db.client import (
    Op,
    SupabaseClient,
    close_clients,
    get_admin_supabase,
    get_supabase,
    in_,
)
from flowershop.db.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackingStoreError,
    NotFoundError,
    ValidationError,
)
from flowershop.db.query_logging import logged_query

__all__ = [
    # Client
    "SupabaseClient",
    "get_supabase",
    "get_admin_supabase",
    "close_clients",
    "Op",
    "in_",
    # Exceptions
    "BackingStoreError",
    "NotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "ValidationError",
    # Logging
    "logged_query",
]
