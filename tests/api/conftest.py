"""Helpers for API tests: build catalog data through the admin endpoints."""

import pytest
from httpx import AsyncClient


@pytest.fixture
def create_category(client: AsyncClient, admin_headers: dict[str, str]):
    async def _create(name: str, parent_id: int | None = None, **fields) -> dict:
        response = await client.post(
            "/api/v1/admin/categories",
            json={"name": name, "parent_id": parent_id, **fields},
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
async def document_types(client: AsyncClient, seeded: None) -> dict[str, int]:
    response = await client.get("/api/v1/document-types")
    return {t["name"]: t["id"] for t in response.json()}


@pytest.fixture
def upload_document(client: AsyncClient, admin_headers: dict[str, str]):
    async def _upload(
        category_id: int,
        name: str,
        *,
        filename: str = "data.csv",
        content: bytes = b"year,amount\n2024,100\n",
        **form,
    ):
        return await client.post(
            "/api/v1/admin/documents",
            data={"name": name, "category_id": str(category_id), **form},
            files={"file": (filename, content, "text/csv")},
            headers=admin_headers,
        )

    return _upload
