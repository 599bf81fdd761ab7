"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any, BinaryIO, cast

import aiofiles
import aiofiles.os

from transparency_portal.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageException,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from transparency_portal.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_META_SUFFIX = ".meta.json"


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Paths are validated against storage_root. Writes go to a temp file in
    the target directory, are checksummed, then renamed into place.
    Upload metadata is kept in a .meta.json sidecar.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(self, storage_root: str) -> None:
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, storage_ref: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / storage_ref).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(storage_ref, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(storage_ref, "path_validation")
        return full_path

    @staticmethod
    def _meta_path(file_path: Path) -> Path:
        return file_path.with_name(file_path.name + _META_SUFFIX)

    async def _compute_checksum(self, file_path: Path) -> str:
        sha256 = hashlib.sha256()
        async with aiofiles.open(file_path, "rb") as f:
            while chunk := await f.read(self.CHUNK_SIZE):
                sha256.update(chunk)
        return sha256.hexdigest()

    async def _read_metadata(self, file_path: Path) -> dict[str, Any]:
        meta_path = self._meta_path(file_path)
        if not meta_path.exists():
            return {}
        async with aiofiles.open(meta_path, "r") as f:
            result = json.loads(await f.read())
        return cast(dict[str, Any], result) if isinstance(result, dict) else {}

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Write file_data to storage_ref atomically; verify the SHA-256 checksum.

        Raises:
            StorageUploadError: Checksum mismatch, existing file or I/O failure.
            StoragePermissionError: storage_ref escapes the storage root.
        """
        target_path = self._get_full_path(storage_ref)
        if target_path.exists():
            raise StorageUploadError(storage_ref, "file already exists")
        temp_path: str | None = None
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            content = file_data.read()
            fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(fd)
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(content)
            computed = await self._compute_checksum(Path(temp_path))
            if computed != expected_checksum:
                raise StorageUploadError(
                    storage_ref,
                    f"checksum mismatch (expected {expected_checksum}, got {computed})",
                )
            os.chmod(temp_path, 0o640)
            await aiofiles.os.rename(temp_path, target_path)
            temp_path = None
            upload_meta: dict[str, Any] = {
                "storage_ref": storage_ref,
                "checksum": computed,
                "size": len(content),
                "content_type": content_type,
                "uploaded_at": utc_now().isoformat(),
                "custom": metadata or {},
            }
            async with aiofiles.open(self._meta_path(target_path), "w") as f:
                await f.write(json.dumps(upload_meta, indent=2))
            logger.info("Stored %s (%s bytes)", storage_ref, len(content))
            return upload_meta
        except StorageException:
            raise
        except OSError as e:
            raise StorageUploadError(storage_ref, str(e)) from e
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

    async def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content in CHUNK_SIZE pieces."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        try:
            async with aiofiles.open(file_path, "rb") as f:
                while chunk := await f.read(self.CHUNK_SIZE):
                    yield chunk
        except OSError as e:
            raise StorageDownloadError(storage_ref, str(e)) from e

    async def delete(self, storage_ref: str) -> bool:
        """Delete file and its sidecar; prune empty parent directories."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.exists():
            return False
        try:
            await aiofiles.os.remove(file_path)
            meta_path = self._meta_path(file_path)
            if meta_path.exists():
                await aiofiles.os.remove(meta_path)
        except OSError as e:
            raise StorageDeleteError(storage_ref, str(e)) from e
        parent = file_path.parent
        while parent != self.storage_root and not any(parent.iterdir()):
            parent.rmdir()
            parent = parent.parent
        logger.info("Deleted %s", storage_ref)
        return True

    async def exists(self, storage_ref: str) -> bool:
        try:
            return self._get_full_path(storage_ref).is_file()
        except StoragePermissionError:
            return False

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return size, content_type, checksum and custom metadata."""
        file_path = self._get_full_path(storage_ref)
        if not file_path.is_file():
            raise StorageNotFoundError(storage_ref)
        stored = await self._read_metadata(file_path)
        return {
            "size": file_path.stat().st_size,
            "content_type": stored.get("content_type", "application/octet-stream"),
            "checksum": stored.get("checksum"),
            "custom": stored.get("custom", {}),
        }
