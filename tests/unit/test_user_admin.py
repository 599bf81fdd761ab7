"""Tests for UserAdminService: validation, duplicates, role sets and permission cache drops."""

from unittest.mock import AsyncMock

import pytest

from transparency_portal.application.dtos.user import RoleResult, UserResult
from transparency_portal.application.use_cases.users import UserAdminService
from transparency_portal.domain.exceptions import (
    DuplicateUserException,
    ResourceNotFoundException,
    ValidationException,
)

EDITOR = RoleResult(id=2, code="editor", name="Editor", description=None, is_active=True)
RETIRED = RoleResult(id=9, code="retired", name="Retired", description=None, is_active=False)


def _user(
    user_id: int = 7, *, is_active: bool = True, email: str = "ana@example.org"
) -> UserResult:
    return UserResult(
        id=user_id, username="ana", email=email, full_name="Ana", is_active=is_active
    )


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.get_by_id.return_value = _user()
    repo.get_by_username.return_value = None
    repo.get_by_email.return_value = None
    repo.create_user.return_value = _user()
    repo.update_user.side_effect = lambda user_id, **fields: _user(
        user_id,
        is_active=fields.get("is_active", True),
        email=fields.get("email", "ana@example.org"),
    )
    return repo


@pytest.fixture
def role_repo():
    repo = AsyncMock()
    repo.get_roles.side_effect = lambda ids: [r for r in (EDITOR, RETIRED) if r.id in set(ids)]
    repo.get_roles_for_users.return_value = {7: [EDITOR]}
    return repo


@pytest.fixture
def authorization():
    return AsyncMock()


@pytest.fixture
def queued() -> list:
    return []


@pytest.fixture
def service(user_repo, role_repo, authorization, queued) -> UserAdminService:
    return UserAdminService(
        user_repo, role_repo, authorization=authorization, defer_until_commit=queued.append
    )


async def test_create_normalizes_email_and_assigns_roles(service, user_repo, role_repo) -> None:
    created = await service.create(
        username="  ana ",
        email=" Ana@Example.ORG ",
        password="long-enough",
        full_name="<b>Ana</b>",
        role_ids=[2],
    )

    user_repo.create_user.assert_awaited_once_with(
        username="ana",
        email="ana@example.org",
        password="long-enough",
        full_name="Ana",
        is_active=True,
    )
    role_repo.set_user_roles.assert_awaited_once_with(7, {2})
    assert [r.code for r in created.roles] == ["editor"]


async def test_create_rejects_taken_username(service, user_repo) -> None:
    user_repo.get_by_username.return_value = _user(3)
    with pytest.raises(DuplicateUserException) as exc:
        await service.create(username="ana", email="new@example.org", password="long-enough")
    assert exc.value.details["field"] == "username"
    user_repo.create_user.assert_not_awaited()


async def test_create_rejects_taken_email(service, user_repo) -> None:
    user_repo.get_by_email.return_value = _user(3)
    with pytest.raises(DuplicateUserException) as exc:
        await service.create(username="other", email="ANA@example.org", password="long-enough")
    assert exc.value.details["field"] == "email"


@pytest.mark.parametrize("role_ids", [[2, 404], [9]])
async def test_create_requires_active_existing_roles(service, user_repo, role_ids) -> None:
    with pytest.raises(ResourceNotFoundException) as exc:
        await service.create(
            username="ana", email="ana@example.org", password="long-enough", role_ids=role_ids
        )
    assert exc.value.resource_type == "role"
    user_repo.create_user.assert_not_awaited()


async def test_create_rejects_short_password(service) -> None:
    with pytest.raises(ValidationException) as exc:
        await service.create(username="ana", email="ana@example.org", password="short")
    assert exc.value.details["field"] == "password"


async def test_update_replaces_roles_and_forgets_permissions(
    service, role_repo, authorization, queued
) -> None:
    await service.update(7, {"role_ids": []})

    role_repo.set_user_roles.assert_awaited_once_with(7, set())
    authorization.invalidate_user_cache.assert_awaited_once_with(7)
    assert len(queued) == 1
    await queued[0]()
    assert authorization.invalidate_user_cache.await_count == 2


async def test_update_of_name_keeps_permission_cache(
    service, user_repo, role_repo, authorization, queued
) -> None:
    await service.update(7, {"full_name": "Ana Maria"})

    user_repo.update_user.assert_awaited_once_with(7, full_name="Ana Maria")
    role_repo.set_user_roles.assert_not_awaited()
    authorization.invalidate_user_cache.assert_not_awaited()
    assert queued == []


@pytest.mark.parametrize("field", ["email", "is_active", "role_ids"])
async def test_update_rejects_null(service, user_repo, field) -> None:
    with pytest.raises(ValidationException) as exc:
        await service.update(7, {field: None})
    assert exc.value.details["field"] == field
    user_repo.update_user.assert_not_awaited()


async def test_update_rejects_unknown_fields(service) -> None:
    with pytest.raises(ValidationException):
        await service.update(7, {"username": "renamed"})


async def test_update_email_taken_by_someone_else(service, user_repo) -> None:
    user_repo.get_by_email.return_value = _user(8, email="bob@example.org")
    with pytest.raises(DuplicateUserException):
        await service.update(7, {"email": "bob@example.org"})


async def test_update_email_to_own_address_is_allowed(service, user_repo) -> None:
    user_repo.get_by_email.return_value = _user(7)
    result = await service.update(7, {"email": "ANA@example.org"})
    assert result.user.email == "ana@example.org"


async def test_deactivate_then_restore(service, user_repo, authorization) -> None:
    deactivated = await service.deactivate(7)
    assert deactivated.user.is_active is False
    authorization.invalidate_user_cache.assert_awaited_with(7)

    user_repo.get_by_id.return_value = _user(is_active=False)
    with pytest.raises(ResourceNotFoundException):
        await service.deactivate(7)

    restored = await service.restore(7)
    assert restored.user.is_active is True


async def test_restore_of_active_user_changes_nothing(service, user_repo, authorization) -> None:
    await service.restore(7)
    user_repo.update_user.assert_not_awaited()
    authorization.invalidate_user_cache.assert_not_awaited()


async def test_missing_user_is_not_found(service, user_repo) -> None:
    user_repo.get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException) as exc:
        await service.get(99)
    assert exc.value.resource_type == "user"


async def test_reset_password(service, user_repo) -> None:
    await service.reset_password(7, "brand-new-pass")
    user_repo.set_password.assert_awaited_once_with(7, "brand-new-pass")


async def test_users_with_unknown_role(service, role_repo) -> None:
    role_repo.get_role.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.users_with_role(404)


async def test_without_authorization_nothing_is_queued(user_repo, role_repo, queued) -> None:
    service = UserAdminService(user_repo, role_repo, defer_until_commit=queued.append)
    await service.deactivate(7)
    assert queued == []
