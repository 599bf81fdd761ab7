"""Auth API: login and current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from transparency_portal.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_permission_resolver,
    get_user_repo,
)
from transparency_portal.application.dtos.user import UserResult
from transparency_portal.application.services import AuthorizationService
from transparency_portal.core.config import get_settings
from transparency_portal.core.limiter import limit_auth
from transparency_portal.domain.exceptions import AuthenticationException
from transparency_portal.infrastructure.persistence.repositories import UserRepository
from transparency_portal.infrastructure.security.jwt import create_access_token
from transparency_portal.infrastructure.services import PermissionResolver
from transparency_portal.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    TokenResponse,
)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    user_repo: UserRepository = Depends(get_user_repo),
):
    """Authenticate with username and password; return a JWT.

    Unknown user, inactive user and wrong password all give the same 401.
    """
    user = await user_repo.authenticate(body.username, body.password)
    if not user:
        raise AuthenticationException("Invalid credentials")
    settings = get_settings()
    token = create_access_token(user.id, extra_claims={"username": user.username})
    return TokenResponse(
        access_token=token,
        expires_in=settings.access_token_expire_minutes * 60,
    )


@router.get("/me", response_model=CurrentUserResponse)
async def read_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
):
    """Current user with role codes and flattened permission codes."""
    permissions = await auth_svc.get_user_permissions(current_user.id)
    return CurrentUserResponse(
        id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        full_name=current_user.full_name,
        is_active=current_user.is_active,
        roles=await resolver.get_user_roles(current_user.id),
        permissions=sorted(permissions),
    )
