"""Pytest configuration and fixtures for the transparency portal.

Environment is set before any transparency_portal import so Settings
validate against an in-memory SQLite database. Repository and API tests
share one StaticPool engine per test; every request gets its own session.
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-at-least-32-chars"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="portal-storage-")
os.environ["REDIS_ENABLED"] = "false"
os.environ["RATE_LIMIT_WRITES"] = "1000/minute"
os.environ["RATE_LIMIT_LOGIN"] = "1000/minute"

from collections.abc import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from transparency_portal.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from transparency_portal.core.limiter import limiter  # noqa: E402
from transparency_portal.infrastructure.cache import MemoryCache  # noqa: E402
from transparency_portal.infrastructure.external.storage import (  # noqa: E402
    LocalStorageService,
)
from transparency_portal.infrastructure.persistence import models  # noqa: E402,F401
from transparency_portal.infrastructure.persistence.database import (  # noqa: E402
    Base,
    get_db,
    get_db_transactional,
    transaction,
)
from transparency_portal.infrastructure.persistence.seed import (  # noqa: E402
    AdminAccount,
    seed_all,
)
from transparency_portal.main import app  # noqa: E402

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "AdminPassword123!"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Fresh in-memory database with the full schema."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Changes are flushed, not committed."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def storage(tmp_path) -> LocalStorageService:
    return LocalStorageService(storage_root=str(tmp_path / "storage"))


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    storage: LocalStorageService,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app, with DB dependencies bound to the test engine."""

    async def _get_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    async def _get_db_transactional() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            async with transaction(session):
                yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_db_transactional] = _get_db_transactional
    app.state.cache = MemoryCache()
    app.state.cache_backend = "memory"
    app.state.storage = storage
    limiter.reset()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    app.state.cache = None
    app.state.storage = None


@pytest.fixture
async def seeded(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Permissions, roles, document types and the admin user, committed."""
    async with session_factory() as session:
        async with session.begin():
            await seed_all(
                session,
                AdminAccount(
                    username=ADMIN_USERNAME,
                    password=ADMIN_PASSWORD,
                    email="admin@portal.test",
                ),
            )


@pytest.fixture
async def admin_headers(client: AsyncClient, seeded: None) -> dict[str, str]:
    """Authorization header for the seeded admin (role admin, *:*)."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_credentials() -> dict[str, str]:
    return {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
