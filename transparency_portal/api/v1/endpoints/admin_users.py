"""User and role administration API. Every route needs user:manage."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from transparency_portal.api.v1.dependencies import (
    get_user_admin_service,
    require_permission,
)
from transparency_portal.application.dtos.user import UserResult
from transparency_portal.application.use_cases.users import UserAdminService
from transparency_portal.core.constants import DEFAULT_USER_PAGE_SIZE, MAX_USER_PAGE_SIZE
from transparency_portal.core.limiter import limit_writes
from transparency_portal.schemas.user import (
    RoleResponse,
    UserCountResponse,
    UserCreateRequest,
    UserListResponse,
    UserPasswordRequest,
    UserResponse,
    UserUpdateRequest,
)

router = APIRouter()

UserManager = Annotated[UserResult, Depends(require_permission("user", "manage"))]


@router.get("/count", response_model=UserCountResponse)
async def count_users(
    _: UserManager,
    is_active: bool | None = Query(None),
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    return UserCountResponse(total=await user_svc.count(is_active=is_active))


@router.get("/roles", response_model=list[RoleResponse])
async def list_roles(
    _: UserManager,
    is_active: bool | None = Query(None),
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Roles that can be assigned, ordered by name."""
    roles = await user_svc.list_roles(is_active=is_active)
    return [RoleResponse.model_validate(r) for r in roles]


@router.get("/roles/{role_id}/users", response_model=list[UserResponse])
async def list_users_with_role(
    role_id: int,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    users = await user_svc.users_with_role(role_id)
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Create a user and assign its roles. 409 when the username or email is taken."""
    created = await user_svc.create(**body.model_dump())
    return UserResponse.from_result(created)


@router.get("", response_model=UserListResponse)
async def list_users(
    _: UserManager,
    q: str | None = Query(None, max_length=255, description="Matches username, email or full name"),
    is_active: bool | None = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_USER_PAGE_SIZE, ge=1, le=MAX_USER_PAGE_SIZE),
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Users, newest first, active and inactive unless is_active is given."""
    users, total = await user_svc.list_users(
        term=q, is_active=is_active, skip=skip, limit=limit
    )
    return UserListResponse(
        items=[UserResponse.from_result(u) for u in users],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    return UserResponse.from_result(await user_svc.get(user_id))


@router.patch("/{user_id}", response_model=UserResponse)
@limit_writes
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdateRequest,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Partial update. role_ids replaces the assigned roles."""
    updated = await user_svc.update(user_id, body.model_dump(exclude_unset=True))
    return UserResponse.from_result(updated)


@router.delete("/{user_id}", response_model=UserResponse)
@limit_writes
async def deactivate_user(
    request: Request,
    user_id: int,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Soft delete; the account can no longer log in."""
    return UserResponse.from_result(await user_svc.deactivate(user_id))


@router.post("/{user_id}/restore", response_model=UserResponse)
@limit_writes
async def restore_user(
    request: Request,
    user_id: int,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    return UserResponse.from_result(await user_svc.restore(user_id))


@router.post("/{user_id}/password", status_code=204)
@limit_writes
async def reset_password(
    request: Request,
    user_id: int,
    body: UserPasswordRequest,
    _: UserManager,
    user_svc: UserAdminService = Depends(get_user_admin_service),
):
    """Replace the user's password with one chosen by the administrator."""
    await user_svc.reset_password(user_id, body.password)
    return Response(status_code=204)
