"""Authorization service: permission checks with optional caching (IPermissionResolver + cache)."""

from __future__ import annotations

from transparency_portal.application.interfaces.services import (
    ICacheService,
    IPermissionResolver,
)
from transparency_portal.core.cache_keys import permission_key, permission_pattern
from transparency_portal.domain.exceptions import AuthorizationException


class AuthorizationService:
    """Centralized permission checking; uses cache when available (5 min TTL typical)."""

    def __init__(
        self,
        permission_resolver: IPermissionResolver,
        cache: ICacheService | None = None,
        cache_ttl: int = 300,
    ) -> None:
        self.permission_resolver = permission_resolver
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def get_user_permissions(self, user_id: int) -> set[str]:
        """Return set of permission codes (e.g. document:create). Uses cache if available."""
        key = permission_key(user_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(key)
            if cached is not None:
                return set(cached)

        permissions = await self.permission_resolver.get_user_permissions(user_id)
        if self.cache and self.cache.is_available():
            await self.cache.set(key, sorted(permissions), ttl=self.cache_ttl)
        return permissions

    @staticmethod
    def grants(permissions: set[str], resource: str, action: str) -> bool:
        """True if permissions hold resource:action, resource:* or *:*."""
        return bool(
            {f"{resource}:{action}", f"{resource}:*", "*:*"} & permissions
        )

    async def check_permission(self, user_id: int, resource: str, action: str) -> bool:
        permissions = await self.get_user_permissions(user_id)
        return self.grants(permissions, resource, action)

    async def require_permission(self, user_id: int, resource: str, action: str) -> None:
        """Raise AuthorizationException if user lacks permission."""
        if not await self.check_permission(user_id, resource, action):
            raise AuthorizationException(resource=resource, action=action)

    async def invalidate_user_cache(self, user_id: int) -> None:
        if self.cache and self.cache.is_available():
            await self.cache.delete(permission_key(user_id))

    async def invalidate_all(self) -> None:
        """Drop every cached permission set (after role or grant changes)."""
        if self.cache and self.cache.is_available():
            await self.cache.delete_pattern(permission_pattern())
