"""User and role administration schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from transparency_portal.application.dtos.user import UserWithRoles
from transparency_portal.core.constants import MIN_PASSWORD_LENGTH


class UserCreateRequest(BaseModel):
    """Request body for creating a user with its roles."""

    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)
    role_ids: list[int] = Field(default_factory=list, max_length=50)
    is_active: bool = True


class UserUpdateRequest(BaseModel):
    """Request body for PATCH (partial). role_ids replaces the whole role set."""

    email: EmailStr | None = None
    full_name: str | None = Field(default=None, max_length=255)
    is_active: bool | None = None
    role_ids: list[int] | None = Field(default=None, max_length=50)

    @field_validator("email", "is_active", "role_ids", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class UserPasswordRequest(BaseModel):
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: str | None = None
    is_active: bool


class UserResponse(BaseModel):
    """User response (no password) with assigned role codes."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    full_name: str | None = None
    is_active: bool
    roles: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: UserWithRoles) -> "UserResponse":
        u = result.user
        return cls(
            id=u.id,
            username=u.username,
            email=u.email,
            full_name=u.full_name,
            is_active=u.is_active,
            roles=[r.code for r in result.roles],
        )


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    skip: int
    limit: int


class UserCountResponse(BaseModel):
    total: int
