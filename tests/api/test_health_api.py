"""Tests for the health endpoint and request id propagation."""

from httpx import AsyncClient


async def test_health_reports_cache_backend(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["cache"] == "memory"
    assert body["version"]


async def test_responses_carry_request_id(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["x-request-id"] == "req-42"


async def test_unknown_route_uses_error_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json()["error"] == "HTTP_ERROR"
