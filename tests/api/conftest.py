"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from leazr.api.dependencies import get_service
from leazr.application.variant_service import VariantPriceService
from leazr.catalog.generator import GeneratorConfig
from leazr.infrastructure.config import settings
from leazr.main import app


@pytest.fixture
def client(store) -> Iterator[TestClient]:
    """Create test client without authentication."""
    app.dependency_overrides[get_service] = lambda: VariantPriceService(store)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(store) -> Iterator[TestClient]:
    """Create test client with valid API key, backed by the in-memory store."""
    app.dependency_overrides[get_service] = lambda: VariantPriceService(
        store, GeneratorConfig(seed=7)
    )
    yield TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.leazr_api_key}"},
    )
    app.dependency_overrides.clear()
