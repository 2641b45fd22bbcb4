"""
Tests for verification ledger endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.fixture
def populated_registry(registry):
    registry.register("P1", "widget", "ACME", 1000, "Factory A")
    registry.register("P2", "gadget", "Globex", 1001, "Factory B")
    registry.verify("P1", "hash123", 1020, "Warehouse C")
    registry.verify("P2", "hash456", 1010, "Warehouse D")
    registry.verify("P1", "hash789", 1030, "Shop E")
    return registry


@pytest.mark.asyncio
async def test_verification_logs_in_range(async_client: AsyncClient, populated_registry):
    """Test the inclusive range returns entries in insertion order."""
    response = await async_client.get("/api/v1/verifications", params={"start": 1010, "end": 1020})
    assert response.status_code == 200

    data = response.json()
    assert data["total"] == 2
    assert [entry["product_id"] for entry in data["entries"]] == ["P1", "P2"]
    assert [entry["result"]["timestamp"] for entry in data["entries"]] == [1020, 1010]


@pytest.mark.asyncio
async def test_verification_logs_empty_range(async_client: AsyncClient, populated_registry):
    """Test ranges with no matches, including inverted ones, return empty lists."""
    for start, end in [(0, 999), (1020, 1019)]:
        response = await async_client.get("/api/v1/verifications", params={"start": start, "end": end})
        assert response.status_code == 200
        assert response.json()["entries"] == []
        assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_verification_logs_require_bounds(async_client: AsyncClient):
    """Test both range bounds are mandatory."""
    response = await async_client.get("/api/v1/verifications", params={"start": 0})
    assert response.status_code == 422
