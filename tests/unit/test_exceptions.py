"""Tests for domain exceptions and their HTTP mapping."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from transparency_portal.core.exception_handlers import register_exception_handlers
from transparency_portal.domain.exceptions import (
    AuthorizationException,
    CategoryCycleException,
    CategoryHasChildrenException,
    CategoryHasDocumentsException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from transparency_portal.infrastructure.exceptions import StorageNotFoundError


def test_not_found_message_and_details() -> None:
    exc = ResourceNotFoundException("category", 42)
    assert exc.message == "category not found: 42"
    assert exc.details == {"resource_type": "category", "resource_id": 42}


def test_delete_conflicts_carry_reason() -> None:
    children = CategoryHasChildrenException(3, 2)
    documents = CategoryHasDocumentsException(3, 5)
    cycle = CategoryCycleException(3, 7)
    assert isinstance(children, ConflictException)
    assert (children.reason, documents.reason, cycle.reason) == ("children", "documents", "cycle")
    assert documents.details["count"] == 5
    assert cycle.details["parent_id"] == 7


def test_authorization_message_names_resource_and_action() -> None:
    exc = AuthorizationException(resource="category", action="manage")
    assert exc.message == "Permission denied: manage on category"
    assert exc.details == {"resource": "category", "action": "manage"}


def test_validation_field_is_optional() -> None:
    assert ValidationException("bad").details == {}
    assert ValidationException("bad", field="q").details == {"field": "q"}


@pytest.fixture
def app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    async def missing():
        raise ResourceNotFoundException("document", 9)

    @app.get("/conflict")
    async def conflict():
        raise CategoryHasChildrenException(1, 3)

    @app.get("/forbidden")
    async def forbidden():
        raise AuthorizationException(resource="document", action="delete")

    @app.get("/invalid")
    async def invalid():
        raise ValidationException("too short", field="q")

    @app.get("/gone")
    async def gone():
        raise StorageNotFoundError("category-1/x.csv")

    @app.get("/typed/{item_id}")
    async def typed(item_id: int):
        return {"item_id": item_id}

    return app


@pytest.mark.parametrize(
    ("path", "status", "error"),
    [
        ("/missing", 404, "RESOURCE_NOT_FOUND"),
        ("/conflict", 409, "CONFLICT"),
        ("/forbidden", 403, "PERMISSION_DENIED"),
        ("/invalid", 400, "VALIDATION_ERROR"),
        ("/gone", 404, "STORAGE_NOT_FOUND"),
        ("/typed/abc", 422, "VALIDATION_ERROR"),
    ],
)
async def test_error_envelope(app: FastAPI, path: str, status: int, error: str) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get(path)
    body = response.json()
    assert response.status_code == status
    assert body["error"] == error
    assert body["status_code"] == status
    assert "timestamp" in body
    assert "message" in body
