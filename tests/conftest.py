"""
Pytest configuration and fixtures.
"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["APP_DEBUG"] = "false"
os.environ["SNAPSHOT_BACKEND"] = "memory"

from provenance_registry.config.settings import Settings
from provenance_registry.db.snapshot_store import InMemorySnapshotStore
from provenance_registry.main import create_app
from provenance_registry.services.registry_service import RegistryService


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory registry."""
    return Settings(_env_file=None, app_env="testing", snapshot_backend="memory")


@pytest.fixture
def snapshot_store() -> InMemorySnapshotStore:
    return InMemorySnapshotStore()


@pytest.fixture
def registry(settings, snapshot_store) -> RegistryService:
    """Empty registry backed by an in-memory snapshot store."""
    return RegistryService(snapshot_store=snapshot_store, settings=settings)


@pytest.fixture
def app(settings, registry):
    return create_app(settings=settings, registry=registry)


@pytest.fixture
def client(app) -> TestClient:
    """
    Create test client for FastAPI app.

    Returns:
        TestClient: FastAPI test client
    """
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client for FastAPI app.

    Yields:
        AsyncClient: Async test client
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
