"""Tests for the health endpoint and request-id middleware."""
import pytest
from httpx import AsyncClient, ASGITransport

from freightdesk.main import app
from freightdesk.middleware.request_id import REQUEST_ID_HEADER


@pytest.mark.asyncio
async def test_health_returns_ok_with_env():
    """GET /health should return 200 with status ok and the test environment."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "env": "test"}


@pytest.mark.asyncio
async def test_request_id_is_echoed():
    """An incoming X-Request-ID header is returned unchanged."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health", headers={REQUEST_ID_HEADER: "req-123"})
    assert response.headers[REQUEST_ID_HEADER] == "req-123"


@pytest.mark.asyncio
async def test_request_id_is_generated():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert len(response.headers[REQUEST_ID_HEADER]) == 32
