"""Cache: in-process expiring map and Redis service.

Both backends satisfy CacheProtocol; lifespan picks one from settings
and stores it on app.state.cache.
"""

from transparency_portal.infrastructure.cache.cache_protocol import CacheProtocol
from transparency_portal.infrastructure.cache.memory_cache import MemoryCache
from transparency_portal.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "MemoryCache",
]
