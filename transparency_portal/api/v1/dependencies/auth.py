"""Authentication and RBAC dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.dtos.user import UserResult
from transparency_portal.application.interfaces.services import ICacheService
from transparency_portal.application.services import AuthorizationService
from transparency_portal.core.config import get_settings
from transparency_portal.domain.exceptions import AuthenticationException
from transparency_portal.infrastructure.persistence.database import get_db
from transparency_portal.infrastructure.persistence.repositories import UserRepository
from transparency_portal.infrastructure.security.jwt import verify_token
from transparency_portal.infrastructure.services import PermissionResolver

from .common import get_cache

_http_bearer = HTTPBearer(auto_error=False)


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    return UserRepository(db)


async def get_permission_resolver(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionResolver:
    return PermissionResolver(db)


async def get_authorization_service(
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
) -> AuthorizationService:
    """AuthorizationService with the app cache (None means every check hits the DB)."""
    return AuthorizationService(
        permission_resolver=resolver,
        cache=cache,
        cache_ttl=get_settings().cache_ttl_permissions,
    )


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present and valid; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (ValueError, KeyError):
        return None
    user = await user_repo.get_by_id(user_id)
    if not user or not user.is_active:
        return None
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise AuthenticationException("Not authenticated")
    return current_user


def require_permission(resource: str, action: str):
    """Dependency factory: require JWT auth and that the user has resource:action."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        await auth_svc.require_permission(current_user.id, resource, action)
        return current_user

    return _require
