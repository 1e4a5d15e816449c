"""Authentication services package."""

from authentication.services.auth_service import AuthService
from authentication.services.user_admin_service import UserAdminService

__all__ = ["AuthService", "UserAdminService"]
