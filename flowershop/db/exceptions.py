"""
Exceptions for backing-store and auth interactions.

Every error carries the HTTP status code the API surfaces for it. None of
these are ever cached.
"""

from typing import Optional


class BackingStoreError(Exception):
    """
    Base exception for all backing-store related errors.

    Use this for catching any database, auth or profile lookup failure.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: Optional[str] = None,
    ) -> None:
        """
        Initialize BackingStoreError.

        Args:
            message: Error description
            status_code: HTTP status code to surface
            code: Optional PostgREST/GoTrue error code (e.g. "PGRST116")
        """
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(self.message)


class NotFoundError(BackingStoreError):
    """
    Raised when a single-row lookup matched no row.

    Example:
        >>> raise NotFoundError("bouquet", "4f1c")
    """

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: Optional[str] = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id

        if message is None:
            message = f"{resource_type.capitalize()} '{resource_id}' not found"

        super().__init__(message, status_code=404, code="PGRST116")


class AuthenticationError(BackingStoreError):
    """Raised when no valid session accompanies a request."""

    def __init__(self, message: str = "Unauthorized - Authentication required") -> None:
        super().__init__(message, status_code=401)


class AuthorizationError(BackingStoreError):
    """Raised when the session's user lacks the required role."""

    def __init__(self, message: str = "Forbidden - Admin access required") -> None:
        super().__init__(message, status_code=403)


class ValidationError(BackingStoreError):
    """
    Raised when the store rejects a write as invalid.

    Example:
        >>> raise ValidationError("must be positive", field="price")
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: Optional[str] = None,
    ) -> None:
        self.field = field

        if field:
            message = f"{field}: {message}"

        super().__init__(message, status_code=422, code=code)
