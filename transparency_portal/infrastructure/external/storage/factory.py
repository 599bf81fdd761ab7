"""Storage service factory: creates the configured backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from transparency_portal.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from transparency_portal.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: Settings | None = None) -> StorageProtocol:
        """Create storage service from settings (get_settings() when None).

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from transparency_portal.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()
        if backend == "local":
            from transparency_portal.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            if not s.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalStorageService(storage_root=s.storage_root)
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local'")
