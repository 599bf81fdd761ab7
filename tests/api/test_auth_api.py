"""Tests for login, /auth/me and permission gating on admin routes."""

from httpx import AsyncClient

from transparency_portal.infrastructure.persistence.repositories import (
    RbacRepository,
    UserRepository,
)


async def test_login_returns_bearer_token(
    client: AsyncClient, seeded: None, admin_credentials: dict[str, str]
) -> None:
    response = await client.post("/api/v1/auth/login", json=admin_credentials)
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] > 0
    assert body["access_token"]


async def test_login_with_wrong_password_is_401(
    client: AsyncClient, seeded: None, admin_credentials: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={**admin_credentials, "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_me_lists_roles_and_permissions(
    client: AsyncClient, admin_headers: dict[str, str], admin_credentials: dict[str, str]
) -> None:
    response = await client.get("/api/v1/auth/me", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == admin_credentials["username"]
    assert body["roles"] == ["admin"]
    assert body["permissions"] == ["*:*"]


async def test_me_without_token_is_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


async def test_garbage_token_is_401(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_admin_route_requires_authentication(client: AsyncClient) -> None:
    response = await client.post("/api/v1/admin/categories", json={"name": "Finance"})
    assert response.status_code == 401


async def test_admin_route_requires_permission(
    client: AsyncClient, seeded: None, session_factory
) -> None:
    """A user without category:manage gets 403."""
    async with session_factory() as session:
        async with session.begin():
            user = await UserRepository(session).create_user(
                "uploader", "uploader@portal.test", "Uploader-pass-1"
            )
            role_id = await RbacRepository(session).ensure_role("uploader", "Uploader")
            await RbacRepository(session).assign_role(user.id, role_id)

    login = await client.post(
        "/api/v1/auth/login",
        json={"username": "uploader", "password": "Uploader-pass-1"},
    )
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    response = await client.post(
        "/api/v1/admin/categories", json={"name": "Finance"}, headers=headers
    )
    assert response.status_code == 403
    assert response.json()["error"] == "PERMISSION_DENIED"

    allowed = await client.get("/api/v1/admin/documents/recent", headers=headers)
    assert allowed.status_code == 200
