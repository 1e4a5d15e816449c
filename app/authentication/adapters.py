"""
Custom adapters for django-allauth.

Accounts are created by admins or by Google sign-in from an allowed
company domain; nobody can sign up with email/password.

Related files:
    - services/auth_service.py: AuthService.is_allowed_email_domain
    - settings.py: ACCOUNT_ADAPTER, SOCIALACCOUNT_ADAPTER, GOOGLE_ALLOWED_DOMAINS

Security:
    - Google users from other domains are rejected before any account is touched
    - Google users get email_verified=True
"""

import logging

from allauth.account.adapter import DefaultAccountAdapter
from allauth.socialaccount.adapter import DefaultSocialAccountAdapter
from rest_framework.exceptions import PermissionDenied

from authentication.services import AuthService

logger = logging.getLogger(__name__)


class CustomAccountAdapter(DefaultAccountAdapter):
    """Closes public email/password signup."""

    def is_open_for_signup(self, request):
        return False


class CustomSocialAccountAdapter(DefaultSocialAccountAdapter):
    """
    Google sign-in rules.

    - Only GOOGLE_ALLOWED_DOMAINS may sign in
    - First login creates the user (username from the Google name, avatar
      from the Google picture); signals.py refreshes the avatar on later logins
    - A Google account whose email matches an existing user signs into it
    """

    def is_open_for_signup(self, request, sociallogin):
        return True

    def pre_social_login(self, request, sociallogin):
        """
        Reject sign-ins whose email domain is not allowed.

        Raises:
            PermissionDenied: email domain is not allowed
        """
        email = sociallogin.user.email or sociallogin.account.extra_data.get("email") or ""
        if not AuthService.is_allowed_email_domain(email):
            logger.warning(f"Google sign-in rejected for domain of {email}")
            raise PermissionDenied("Sign-in is restricted to company email addresses.")

        super().pre_social_login(request, sociallogin)

    def populate_user(self, request, sociallogin, data):
        """Derive username and avatar from the Google profile."""
        from authentication.models import User

        user = super().populate_user(request, sociallogin, data)
        extra = sociallogin.account.extra_data

        display_name = (
            extra.get("name")
            or data.get("name")
            or " ".join(p for p in (data.get("first_name"), data.get("last_name")) if p)
            or (user.email or "").split("@")[0]
        )
        user.username = User.objects.generate_unique_username(display_name)
        user.avatar_url = extra.get("picture", "") or ""
        user.role = User.Role.USER
        return user

    def save_user(self, request, sociallogin, form=None):
        user = super().save_user(request, sociallogin, form)

        user.email_verified = True
        user.save(update_fields=["email_verified", "updated_at"])

        logger.info(f"Google user created: {user.id} ({user.email})")
        return user

