"""Document file storage backends."""

from transparency_portal.infrastructure.external.storage.factory import StorageFactory
from transparency_portal.infrastructure.external.storage.local_storage import (
    LocalStorageService,
)
from transparency_portal.infrastructure.external.storage.protocol import StorageProtocol

__all__ = ["LocalStorageService", "StorageFactory", "StorageProtocol"]
