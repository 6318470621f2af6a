"""
Unit tests for backing-store exceptions.

Tests custom exception classes and their status codes.
"""

import pytest

from flowershop.db.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BackingStoreError,
    NotFoundError,
    ValidationError,
)


class TestBackingStoreError:
    """Test base BackingStoreError exception."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = BackingStoreError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.status_code == 500
        assert error.code is None

    def test_error_with_code(self):
        """Test error carrying a store error code."""
        error = BackingStoreError("bad", status_code=502, code="42P01")

        assert error.status_code == 502
        assert error.code == "42P01"

    def test_is_exception(self):
        """Test that BackingStoreError can be raised and caught."""
        with pytest.raises(BackingStoreError):
            raise BackingStoreError("Test")


class TestSubclasses:
    """Test status codes of the specialized errors."""

    def test_not_found(self):
        """Test NotFoundError names the resource."""
        error = NotFoundError("bouquet", "b1")

        assert error.status_code == 404
        assert error.code == "PGRST116"
        assert error.message == "Bouquet 'b1' not found"
        assert error.resource_type == "bouquet"
        assert error.resource_id == "b1"

    def test_not_found_custom_message(self):
        error = NotFoundError("tag", "t1", message="gone")

        assert error.message == "gone"

    def test_authentication(self):
        """Test AuthenticationError defaults to the 401 message."""
        error = AuthenticationError()

        assert error.status_code == 401
        assert error.message == "Unauthorized - Authentication required"

    def test_authorization(self):
        """Test AuthorizationError defaults to the 403 message."""
        error = AuthorizationError()

        assert error.status_code == 403
        assert error.message == "Forbidden - Admin access required"

    def test_validation(self):
        """Test ValidationError prefixes the field."""
        error = ValidationError("must be positive", field="price")

        assert error.status_code == 422
        assert error.message == "price: must be positive"
        assert error.field == "price"

    def test_hierarchy(self):
        """Test every specialized error is a BackingStoreError."""
        for error in (
            NotFoundError("bouquet", "b1"),
            AuthenticationError(),
            AuthorizationError(),
            ValidationError("x"),
        ):
            assert isinstance(error, BackingStoreError)
