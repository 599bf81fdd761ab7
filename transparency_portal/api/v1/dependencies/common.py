"""Shared dependencies: cache and storage (composition root)."""

from __future__ import annotations

from fastapi import Request

from transparency_portal.application.interfaces.services import ICacheService
from transparency_portal.infrastructure.external.storage.factory import StorageFactory
from transparency_portal.infrastructure.external.storage.protocol import StorageProtocol


def get_cache(request: Request) -> ICacheService | None:
    """Cache set up in the app lifespan (app.state.cache); None disables caching."""
    return getattr(request.app.state, "cache", None)


def get_storage_service(request: Request) -> StorageProtocol:
    """Storage backend from app.state, or a fresh one from settings."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = StorageFactory.create_storage_service()
        request.app.state.storage = storage
    return storage
