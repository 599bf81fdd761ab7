"""User administration dependencies."""

from __future__ import annotations

from functools import partial
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from transparency_portal.application.services import AuthorizationService
from transparency_portal.application.use_cases.users import UserAdminService
from transparency_portal.infrastructure.persistence.database import (
    after_commit,
    get_db_transactional,
)
from transparency_portal.infrastructure.persistence.repositories import (
    RbacRepository,
    UserRepository,
)

from .auth import get_authorization_service


def get_user_admin_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[AuthorizationService, Depends(get_authorization_service)],
) -> UserAdminService:
    """User and role repositories share the request transaction."""
    return UserAdminService(
        UserRepository(db),
        RbacRepository(db),
        authorization=authorization,
        defer_until_commit=partial(after_commit, db),
    )
