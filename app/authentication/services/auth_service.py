"""
Authentication service.

Sign-in paths that are not handled by dj-rest-auth directly:
- Google domain restriction (used by the allauth social adapter)
- Magic links: request, admin-generated link, verification

Related files:
    - models.py: User, LoginToken
    - tasks.py: send_magic_link_email
    - adapters.py: calls is_allowed_email_domain

Security:
    - Tokens are 32 random bytes (64 hex chars), expiring and single-use
    - Verification locks the token row so a link cannot be consumed twice
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils import timezone

from core.helpers import generate_token
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from authentication.models import LoginToken, User


class AuthService(BaseService):
    """
    Magic-link and Google sign-in rules.

    Usage:
        from authentication.services import AuthService

        result = AuthService.request_magic_link("ana@netnode.ag")
        if not result.success:
            ...  # USER_NOT_FOUND

        result = AuthService.verify_magic_link(token_string)
        user = result.data
    """

    @staticmethod
    def is_allowed_email_domain(email: str) -> bool:
        """
        Check whether an email may sign in with Google.

        The domain must match one of GOOGLE_ALLOWED_DOMAINS exactly
        (case-insensitive). An empty allow-list permits every domain.
        """
        allowed = [d.lower().lstrip("@") for d in settings.GOOGLE_ALLOWED_DOMAINS if d]
        if not allowed:
            return True
        if not email or "@" not in email:
            return False
        domain = email.rsplit("@", 1)[1].lower()
        return domain in allowed

    @staticmethod
    def build_login_url(token: str) -> str:
        """Frontend URL that completes a magic-link login."""
        return f"{settings.FRONTEND_URL.rstrip('/')}/auth/verify?token={token}"

    @classmethod
    def create_login_token(cls, user: User, created_by: User | None = None) -> LoginToken:
        """
        Issue a new login token for user.

        Args:
            user: User the link will sign in
            created_by: Admin generating the link (None for self-service)
        """
        from authentication.models import LoginToken

        login_token = LoginToken.objects.create(
            user=user,
            token=generate_token(),
            expires_at=timezone.now()
            + timedelta(minutes=settings.MAGIC_LINK_EXPIRY_MINUTES),
            created_by=created_by,
        )
        cls.get_logger().info(
            f"Login token issued for user {user.id}"
            + (f" by admin {created_by.id}" if created_by else "")
        )
        return login_token

    @classmethod
    def request_magic_link(cls, email: str) -> ServiceResult[LoginToken]:
        """
        Create a login token for email and queue the email carrying it.

        Returns:
            ServiceResult with the LoginToken, or USER_NOT_FOUND
        """
        from authentication.models import User
        from authentication.tasks import send_magic_link_email

        user = User.objects.filter(email__iexact=email.strip(), is_active=True).first()
        if user is None:
            cls.get_logger().warning(f"Magic link requested for unknown email: {email}")
            return ServiceResult.failure(
                "User not found. Please contact an administrator.",
                error_code="USER_NOT_FOUND",
            )

        login_token = cls.create_login_token(user)
        send_magic_link_email.delay(login_token.id)
        return ServiceResult.success(login_token)

    @classmethod
    def verify_magic_link(cls, token: str) -> ServiceResult[User]:
        """
        Consume a login token.

        Returns:
            ServiceResult with the signed-in User, or INVALID_TOKEN when the
            token is unknown, expired, already used or the user is inactive
        """
        from authentication.models import LoginToken

        with cls.atomic():
            login_token = (
                LoginToken.objects.select_for_update()
                .select_related("user")
                .filter(token=token)
                .first()
            )
            if login_token is None or not login_token.is_valid:
                cls.get_logger().warning("Invalid or expired magic link presented")
                return ServiceResult.failure(
                    "Invalid or expired login link", error_code="INVALID_TOKEN"
                )

            login_token.used_at = timezone.now()
            login_token.save(update_fields=["used_at", "updated_at"])

            user = login_token.user
            if not user.email_verified:
                user.email_verified = True
                user.save(update_fields=["email_verified", "updated_at"])

        cls.get_logger().info(f"Magic link login for user {user.id}")
        return ServiceResult.success(user)
