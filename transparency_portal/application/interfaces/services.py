"""Service interfaces (ports) for the application layer."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, BinaryIO, Protocol

# Queues a zero-argument coroutine function to run after the surrounding commit
DeferCallback = Callable[[Callable[[], Awaitable[None]]], None]


class ICacheService(Protocol):
    """Minimal cache protocol (descendant sets, permissions)."""

    def is_available(self) -> bool:
        """Return True if cache is usable."""

    async def get(self, key: str) -> Any:
        """Return cached value or None."""

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value with TTL. Returns True on success."""

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True on success."""

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern. Returns count deleted."""


class IPermissionResolver(Protocol):
    """Protocol for resolving user permissions (used by AuthorizationService)."""

    async def get_user_permissions(self, user_id: int) -> set[str]:
        """Return set of permission codes (e.g. {'document:create', 'report:read'})."""


class IStorageService(Protocol):
    """File storage collaborator; the core only keeps relative path strings."""

    async def upload(
        self,
        file_data: BinaryIO,
        storage_ref: str,
        expected_checksum: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Store bytes at storage_ref."""

    def download(self, storage_ref: str) -> AsyncIterator[bytes]:
        """Stream file content."""

    async def delete(self, storage_ref: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""

    async def exists(self, storage_ref: str) -> bool:
        """Return True if file exists."""
