"""
Authentication models.

- User: Custom user model with email login, a unique display username and a chat role
- LoginToken: Single-use magic-link tokens

Google identities are stored by django-allauth (SocialAccount), linked to User.

Related files:
    - managers.py: Custom user manager (username derivation)
    - services.py: AuthService / UserAdminService business logic
    - adapters.py: allauth adapters (domain restriction, profile sync)

Security:
    - Passwords hashed with Django's password hashers
    - Login tokens are cryptographically random, expiring and single-use
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Chat user, identified by email.

    Fields:
        email: Login identifier, unique
        username: Display handle used for @mentions, unique (case-insensitive)
        role: "user" or "admin" (admins manage accounts)
        avatar_url: Profile picture URL (Google picture for Google users)
        email_verified: Whether the email is verified (true for Google users)
        is_active: Whether the account can sign in
        is_staff: Whether the user can access Django admin
        date_joined / updated_at: Timestamps
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (login identifier)",
    )
    username = models.CharField(
        max_length=150,
        unique=True,
        help_text="Display name used in chat and for @mentions",
    )
    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        help_text="Chat role; admins can manage users",
    )
    avatar_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Profile picture URL",
    )
    email_verified = models.BooleanField(
        default=False,
        help_text="Whether the user's email has been verified",
    )
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "authentication_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        constraints = [
            models.UniqueConstraint(
                Lower("username"),
                name="unique_username_case_insensitive",
            ),
        ]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.username or self.email

    def get_short_name(self):
        return self.username or self.email.split("@")[0]

    @property
    def is_chat_admin(self):
        """Admins are users with the admin role or Django superusers."""
        return self.role == self.Role.ADMIN or self.is_superuser


class LoginToken(BaseModel):
    """
    Magic-link login token.

    Fields:
        user: User the link signs in
        token: 64-character random token carried in the link
        expires_at: When the link stops working
        used_at: When the link was consumed (null if unused)
        created_by: Admin who generated the link (null for self-service requests)

    Usage:
        token = LoginToken.objects.create(
            user=user,
            token=generate_token(),
            expires_at=timezone.now() + timedelta(minutes=15),
        )
        if token.is_valid:
            ...
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="login_tokens",
        help_text="User this token signs in",
    )
    token = models.CharField(
        max_length=64,
        unique=True,
        db_index=True,
        help_text="Unique login token",
    )
    expires_at = models.DateTimeField(
        db_index=True,
        help_text="When this token expires",
    )
    used_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When this token was used (null if unused)",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issued_login_tokens",
        help_text="Admin who generated this link, if any",
    )

    class Meta:
        db_table = "authentication_login_token"
        verbose_name = "login token"
        verbose_name_plural = "login tokens"
        indexes = [
            models.Index(
                fields=["user", "used_at"],
                name="auth_login_token_user_idx",
            ),
        ]

    def __str__(self):
        return f"Login token for {self.user}"

    @property
    def is_valid(self):
        """Unused, unexpired and owned by an active user."""
        return (
            self.used_at is None
            and self.expires_at > timezone.now()
            and self.user.is_active
        )
