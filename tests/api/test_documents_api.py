"""Tests for document upload, scoped public search and file download."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def catalog(create_category) -> dict[str, int]:
    """X -> {Y, Z}, Z -> W, plus an unrelated root Q; all accept documents."""
    x = await create_category("X", accepts_documents=True)
    y = await create_category("Y", x["id"], accepts_documents=True)
    z = await create_category("Z", x["id"], accepts_documents=True)
    w = await create_category("W", z["id"], accepts_documents=True)
    q = await create_category("Q", accepts_documents=True)
    return {c["name"]: c["id"] for c in (x, y, z, w, q)}


@pytest.fixture
async def published(catalog, upload_document, document_types) -> dict[str, dict]:
    docs = {}
    for name, category_id in catalog.items():
        response = await upload_document(
            category_id,
            f"Report {name}",
            document_type_id=str(document_types["CSV"]),
            fiscal_year="2024" if name != "Q" else "2023",
        )
        assert response.status_code == 201, response.text
        docs[name] = response.json()
    return docs


async def test_upload_returns_stored_metadata(published) -> None:
    doc = published["W"]
    assert doc["extension"] == "csv"
    assert doc["file_size"] == len(b"year,amount\n2024,100\n")
    assert doc["storage_path"].startswith(f"category-{doc['category_id']}/")
    assert doc["checksum"]


async def test_upload_rejects_disallowed_extension(catalog, upload_document) -> None:
    response = await upload_document(catalog["X"], "Evil", filename="run.exe")
    assert response.status_code == 400
    assert response.json()["details"] == {"field": "file"}


async def test_upload_to_category_not_accepting_documents(
    create_category, upload_document
) -> None:
    folder = await create_category("Folder")
    response = await upload_document(folder["id"], "Nope")
    assert response.status_code == 400


async def test_upload_without_file_is_422(client: AsyncClient, catalog, admin_headers) -> None:
    response = await client.post(
        "/api/v1/admin/documents",
        data={"name": "No file", "category_id": str(catalog["X"])},
        headers=admin_headers,
    )
    assert response.status_code == 422


async def _search(client: AsyncClient, **params) -> dict:
    response = await client.get("/api/v1/documents/search", params=params)
    assert response.status_code == 200, response.text
    return response.json()


async def test_search_scoped_to_subtree(client: AsyncClient, catalog, published) -> None:
    body = await _search(client, category_id=catalog["X"])
    names = {d["name"] for d in body["items"]}
    assert names == {"Report X", "Report Y", "Report Z", "Report W"}
    assert body["pagination"]["total"] == 4
    assert "storage_path" not in body["items"][0]


async def test_search_with_multiple_categories(client: AsyncClient, catalog, published) -> None:
    body = await _search(
        client, category_ids=[catalog["W"], catalog["Q"]], category_id=catalog["X"]
    )
    assert {d["name"] for d in body["items"]} == {"Report W", "Report Q"}


async def test_short_text_is_ignored(client: AsyncClient, catalog, published) -> None:
    everything = await _search(client)
    ignored = await _search(client, q="W")
    assert ignored["pagination"]["total"] == everything["pagination"]["total"]
    assert (await _search(client, q="rt W"))["pagination"]["total"] == 1


async def test_search_pagination(client: AsyncClient, published) -> None:
    body = await _search(client, page=2, page_size=2, order_by="name", order="asc")
    assert [d["name"] for d in body["items"]] == ["Report X", "Report Y"]
    assert body["pagination"] == {
        "page": 2,
        "page_size": 2,
        "total": 5,
        "total_pages": 3,
        "has_next_page": True,
        "has_prev_page": True,
    }


async def test_search_rejects_bad_parameters(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/documents/search", params={"page": 0})).status_code == 422
    assert (
        await client.get("/api/v1/documents/search", params={"order_by": "checksum"})
    ).status_code == 422


async def test_filters_and_stats(client: AsyncClient, published) -> None:
    filters = (await client.get("/api/v1/documents/filters")).json()
    assert filters["fiscal_years"] == [2024, 2023]
    assert filters["extensions"] == ["csv"]

    stats = (await client.get("/api/v1/documents/stats")).json()
    assert stats["total"] == 5
    assert stats["by_extension"] == [{"extension": "csv", "count": 5}]


async def test_download_and_view_stream_the_file(client: AsyncClient, published) -> None:
    doc_id = published["X"]["id"]
    download = await client.get(f"/api/v1/documents/{doc_id}/download")
    assert download.status_code == 200
    assert download.content == b"year,amount\n2024,100\n"
    assert download.headers["content-disposition"] == 'attachment; filename="Report-X.csv"'

    view = await client.get(f"/api/v1/documents/{doc_id}/view")
    assert view.headers["content-disposition"].startswith("inline;")


async def test_availability_points_at_newest_document(
    client: AsyncClient, catalog, published, upload_document, document_types
) -> None:
    newer = await upload_document(
        catalog["X"], "Report X v2", document_type_id=str(document_types["CSV"])
    )
    response = await client.get(f"/api/v1/catalog/{catalog['X']}")
    csv = next(
        a for a in response.json()["document_availability"] if a["document_type_name"] == "CSV"
    )
    assert csv["available"] is True
    assert csv["document_id"] == newer.json()["id"]


async def test_soft_deleted_document_disappears(
    client: AsyncClient, admin_headers, published
) -> None:
    doc_id = published["Y"]["id"]
    deleted = await client.delete(f"/api/v1/admin/documents/{doc_id}", headers=admin_headers)
    assert deleted.status_code == 200
    assert deleted.json()["is_active"] is False

    assert (await client.get(f"/api/v1/documents/{doc_id}")).status_code == 404
    assert (await client.get(f"/api/v1/documents/{doc_id}/download")).status_code == 404


async def test_update_metadata_and_replace_file(
    client: AsyncClient, admin_headers, published, storage
) -> None:
    doc = published["Z"]
    response = await client.patch(
        f"/api/v1/admin/documents/{doc['id']}",
        data={"name": "Report Z (revised)", "periodicity": "annual"},
        files={"file": ("revised.csv", b"a\n1\n", "text/csv")},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["name"] == "Report Z (revised)"
    assert body["periodicity"] == "annual"
    assert body["file_size"] == 4
    assert body["storage_path"] != doc["storage_path"]
    assert not await storage.exists(doc["storage_path"])
    assert await storage.exists(body["storage_path"])

    download = await client.get(f"/api/v1/documents/{doc['id']}/download")
    assert download.content == b"a\n1\n"
