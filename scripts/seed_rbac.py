"""Seed permissions, roles, document types and an initial admin user.

Usage:
    python -m scripts.seed_rbac [admin_username] [admin_email]
The admin password is read from SEED_ADMIN_PASSWORD; when unset a random
one is generated and printed. Without admin_username only reference data
is seeded.
"""

import asyncio
import os
import secrets
import sys

from transparency_portal.core.cache_keys import permission_pattern
from transparency_portal.core.config import get_settings
from transparency_portal.infrastructure.cache import CacheService
from transparency_portal.infrastructure.persistence import database
from transparency_portal.infrastructure.persistence.seed import AdminAccount, seed_all


async def main() -> None:
    settings = get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    admin: AdminAccount | None = None
    generated_password: str | None = None
    if len(sys.argv) > 1:
        username = sys.argv[1]
        email = sys.argv[2] if len(sys.argv) > 2 else f"{username}@localhost"
        password = os.environ.get("SEED_ADMIN_PASSWORD")
        if not password:
            password = generated_password = secrets.token_urlsafe(16)
        admin = AdminAccount(username=username, password=password, email=email)

    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            await seed_all(session, admin)

    if settings.redis_enabled:
        # Grants may have changed; drop cached permission sets
        cache = CacheService()
        await cache.connect()
        removed = await cache.delete_pattern(permission_pattern())
        await cache.disconnect()
        print(f"Invalidated {removed} cached permission sets")

    await database.dispose_engine()
    print("Seeded permissions, roles and document types")
    if admin is not None:
        print(f"Admin user: {admin.username}")
    if generated_password is not None:
        print(f"Password: {generated_password}")


if __name__ == "__main__":
    asyncio.run(main())
