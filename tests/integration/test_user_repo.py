"""User and role repository queries used by user administration."""

from transparency_portal.infrastructure.persistence.repositories import (
    RbacRepository,
    UserRepository,
)


async def _users(db_session):
    repo = UserRepository(db_session)
    ana = await repo.create_user("ana", "Ana.Perez@example.org", "password-1", "Ana Perez")
    bob = await repo.create_user("bob", "bob@example.org", "password-2", "Bob 100%")
    old = await repo.create_user("old", "old@example.org", "password-3", is_active=False)
    return repo, ana, bob, old


async def test_get_by_email_ignores_case(db_session) -> None:
    repo, ana, _, _ = await _users(db_session)
    found = await repo.get_by_email("ana.perez@EXAMPLE.org")
    assert found is not None and found.id == ana.id
    assert await repo.get_by_email("nobody@example.org") is None


async def test_list_and_count_filter_by_term_and_flag(db_session) -> None:
    repo, ana, bob, old = await _users(db_session)

    assert await repo.count_users() == 3
    assert await repo.count_users(is_active=False) == 1
    assert [u.id for u in await repo.list_users(term="PEREZ")] == [ana.id]
    assert [u.id for u in await repo.list_users(term="100%")] == [bob.id]
    assert await repo.count_users(term="example.org", is_active=True) == 2

    page = await repo.list_users(skip=1, limit=1)
    assert len(page) == 1


async def test_set_user_roles_replaces_the_whole_set(db_session) -> None:
    repo, ana, bob, _ = await _users(db_session)
    rbac = RbacRepository(db_session)
    editor = await rbac.ensure_role("editor", "Editor")
    uploader = await rbac.ensure_role("uploader", "Uploader")

    await rbac.set_user_roles(ana.id, [editor, uploader])
    await rbac.set_user_roles(bob.id, [uploader])
    roles = await rbac.get_roles_for_users([ana.id, bob.id])
    assert [r.code for r in roles[ana.id]] == ["editor", "uploader"]

    await rbac.set_user_roles(ana.id, [editor])
    roles = await rbac.get_roles_for_users([ana.id, bob.id])
    assert [r.code for r in roles[ana.id]] == ["editor"]
    assert [r.code for r in roles[bob.id]] == ["uploader"]

    await rbac.set_user_roles(ana.id, [])
    assert ana.id not in await rbac.get_roles_for_users([ana.id])
    assert [u.username for u in await repo.list_by_role(uploader)] == ["bob"]


async def test_list_roles_orders_by_name(db_session) -> None:
    rbac = RbacRepository(db_session)
    await rbac.ensure_role("uploader", "Uploader")
    await rbac.ensure_role("admin", "Administrator")
    roles = await rbac.list_roles(is_active=True)
    assert [r.code for r in roles] == ["admin", "uploader"]
    assert (await rbac.get_role(roles[0].id)).name == "Administrator"
