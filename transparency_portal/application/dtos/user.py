"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model. No password."""

    id: int
    username: str
    email: str
    full_name: str | None
    is_active: bool


@dataclass(frozen=True)
class RoleResult:
    id: int
    code: str
    name: str
    description: str | None
    is_active: bool


@dataclass(frozen=True)
class UserWithRoles:
    """User plus every role assigned to it (active or not), ordered by code."""

    user: UserResult
    roles: tuple[RoleResult, ...] = ()
