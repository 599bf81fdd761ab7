"""Tests for LocalStorageService against a temporary directory."""

import hashlib
import io

import pytest

from transparency_portal.infrastructure.exceptions import (
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from transparency_portal.infrastructure.external.storage import LocalStorageService

CONTENT = b"year,amount\n2024,100\n"
CHECKSUM = hashlib.sha256(CONTENT).hexdigest()


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(storage_root=str(tmp_path))


async def test_upload_then_download(storage: LocalStorageService) -> None:
    meta = await storage.upload(
        io.BytesIO(CONTENT),
        "category-1/budget.csv",
        CHECKSUM,
        "text/csv",
        metadata={"original_filename": "Budget.csv"},
    )
    assert meta["size"] == len(CONTENT)
    assert await storage.exists("category-1/budget.csv")

    chunks = [c async for c in storage.download("category-1/budget.csv")]
    assert b"".join(chunks) == CONTENT

    stored = await storage.get_metadata("category-1/budget.csv")
    assert stored["checksum"] == CHECKSUM
    assert stored["custom"] == {"original_filename": "Budget.csv"}


async def test_checksum_mismatch_leaves_nothing_behind(storage: LocalStorageService, tmp_path) -> None:
    with pytest.raises(StorageUploadError):
        await storage.upload(io.BytesIO(CONTENT), "category-1/x.csv", "0" * 64, "text/csv")
    assert not any(p.is_file() for p in tmp_path.rglob("*"))


async def test_existing_file_is_not_overwritten(storage: LocalStorageService) -> None:
    await storage.upload(io.BytesIO(CONTENT), "category-1/x.csv", CHECKSUM, "text/csv")
    with pytest.raises(StorageUploadError):
        await storage.upload(io.BytesIO(CONTENT), "category-1/x.csv", CHECKSUM, "text/csv")


async def test_path_traversal_is_refused(storage: LocalStorageService) -> None:
    with pytest.raises(StoragePermissionError):
        await storage.upload(io.BytesIO(CONTENT), "../escape.csv", CHECKSUM, "text/csv")
    assert await storage.exists("../escape.csv") is False


async def test_download_missing_file(storage: LocalStorageService) -> None:
    with pytest.raises(StorageNotFoundError):
        async for _ in storage.download("category-1/nothing.csv"):
            pass


async def test_delete_removes_file_and_empty_directory(storage: LocalStorageService, tmp_path) -> None:
    await storage.upload(io.BytesIO(CONTENT), "category-1/x.csv", CHECKSUM, "text/csv")
    assert await storage.delete("category-1/x.csv") is True
    assert not (tmp_path / "category-1").exists()
    assert await storage.delete("category-1/x.csv") is False
