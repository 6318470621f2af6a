"""Fixtures for endpoint tests: an app wired to in-memory stores."""

import pytest
from fastapi.testclient import TestClient

from flowershop.auth import require_admin
from flowershop.catalog.repository import CatalogRepository, get_repository
from flowershop.server import create_app

ADMIN_USER = {"id": "admin-user", "email": "admin@flowershop.test"}


@pytest.fixture
def app(store):
    """App whose repository reads and writes the in-memory store."""
    application = create_app()
    application.dependency_overrides[get_repository] = lambda: CatalogRepository(
        reader=store, writer=store
    )
    return application


@pytest.fixture
def client(app, fake_redis):
    """Anonymous client backed by an in-memory Redis."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(app, fake_redis):
    """Client whose requests pass the admin check."""
    app.dependency_overrides[require_admin] = lambda: ADMIN_USER
    with TestClient(app) as test_client:
        yield test_client
