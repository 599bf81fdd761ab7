"""Tests for RequestIDMiddleware and request id sanitization."""

import re

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient

from transparency_portal.middleware import RequestIDMiddleware
from transparency_portal.middleware.request_id import sanitize_request_id


@pytest.mark.parametrize("raw", ["abc-123", "A_b-9", "x" * 64])
def test_safe_ids_are_kept(raw: str) -> None:
    assert sanitize_request_id(raw) == raw


@pytest.mark.parametrize("raw", [None, "", "has space", "x" * 65, "evil\r\nheader", "ñ"])
def test_unsafe_ids_are_replaced(raw: str | None) -> None:
    assert re.fullmatch(r"[0-9a-f]{32}", sanitize_request_id(raw))


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)

    @app.get("/echo")
    async def echo(request: Request):
        return {"request_id": request.state.request_id}

    return app


async def test_header_is_echoed_and_exposed_to_handlers(app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/echo", headers={"X-Request-ID": "trace-1"})
    assert response.headers["x-request-id"] == "trace-1"
    assert response.json() == {"request_id": "trace-1"}


async def test_missing_header_gets_generated_id(app: FastAPI) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/echo")
    generated = response.headers["x-request-id"]
    assert re.fullmatch(r"[0-9a-f]{32}", generated)
    assert response.json() == {"request_id": generated}
