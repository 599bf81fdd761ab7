"""Application lifespan: cache and storage on startup, cleanup on shutdown."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from transparency_portal.core.config import get_settings
from transparency_portal.infrastructure.cache import CacheService, MemoryCache
from transparency_portal.infrastructure.external.storage import StorageFactory
from transparency_portal.infrastructure.persistence.database import dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: cache (Redis when enabled, in-memory otherwise), storage backend.

    Shutdown: cache disconnect or clear, SQL engine dispose.
    """
    settings = get_settings()

    if settings.redis_enabled:
        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
        app.state.cache_backend = "redis"
    else:
        app.state.cache = MemoryCache()
        app.state.cache_backend = "memory"
    logger.info("Cache backend: %s", app.state.cache_backend)

    app.state.storage = StorageFactory.create_storage_service(settings)

    yield

    cache = getattr(app.state, "cache", None)
    if isinstance(cache, CacheService):
        await cache.disconnect()
        logger.info("Cache disconnected")
    elif isinstance(cache, MemoryCache):
        await cache.clear()
    app.state.cache = None

    await dispose_engine()
