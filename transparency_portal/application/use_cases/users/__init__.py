"""User administration use cases."""

from transparency_portal.application.use_cases.users.user_admin import UserAdminService

__all__ = ["UserAdminService"]
