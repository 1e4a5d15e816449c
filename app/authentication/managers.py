"""
Custom user manager for email-based authentication.

Users log in with their email; the username is the display handle used for
@mentions. When no username is given it is derived from the email local part.

Security:
    - Passwords are hashed via set_password()
    - Users created without a password get an unusable one and can only
      sign in through Google or a magic link
"""

import re

from django.contrib.auth.models import BaseUserManager

USERNAME_MAX_LENGTH = 150


class UserManager(BaseUserManager):
    """
    Manager for User with email as the login identifier.

    Usage:
        user = User.objects.create_user(email="ana@netnode.ag", password="s3cret")
        user.username  # "ana"

        admin = User.objects.create_superuser(email="ops@netnode.ag", password="...")
    """

    def generate_unique_username(self, base):
        """
        Return base, or base with the smallest numeric suffix that is free.

        Comparison is case-insensitive, matching the database constraint.

        Example:
            "ana" -> "ana", then "ana2", "ana3", ...
        """
        base = re.sub(r"\s+", " ", (base or "").strip())[: USERNAME_MAX_LENGTH - 6]
        if not base:
            base = "user"

        candidate = base
        suffix = 1
        while self.filter(username__iexact=candidate).exists():
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user.

        Args:
            email: User's email address (required)
            password: User's password (optional for Google / magic-link users)
            **extra_fields: Additional fields (username, role, avatar_url, ...)

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email).lower()

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        username = extra_fields.pop("username", None) or ""
        if not username.strip():
            username = self.generate_unique_username(email.split("@")[0])

        user = self.model(email=email, username=username.strip(), **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create a superuser. Superusers are chat admins as well.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("email_verified", True)
        extra_fields.setdefault("role", "admin")

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)
