"""Storage service protocol. Implementation: LocalStorageService."""

from collections.abc import AsyncIterator
from typing import Any, BinaryIO, Protocol


class StorageProtocol(Protocol):
    """Protocol for file storage backends. storage_ref is a path relative to the root."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Upload file with checksum verification."""
        ...

    def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content."""
        ...

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
        ...

    async def get_metadata(self, storage_ref: str) -> dict[str, Any]:
        """Return metadata without downloading."""
        ...
