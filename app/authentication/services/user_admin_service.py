"""
Admin user management.

Accounts are provisioned by chat admins; there is no self-service signup.
Every operation returns a ServiceResult whose error_code the views map to
HTTP statuses (USER_NOT_FOUND -> 404, EMAIL_EXISTS / USERNAME_EXISTS -> 409,
NO_VALID_FIELDS / SELF_DELETE / INVALID_ROLE -> 400).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User

UPDATABLE_FIELDS = ("username", "email", "role", "password")


class UserAdminService(BaseService):
    """
    Create, update and delete users on behalf of an admin.

    Usage:
        result = UserAdminService.create_user(
            username="ana", email="ana@netnode.ag", role="user"
        )
        if result.error_code == "EMAIL_EXISTS":
            ...
    """

    @staticmethod
    def _email_taken(email: str, exclude_id: int | None = None) -> bool:
        from authentication.models import User

        qs = User.objects.filter(email__iexact=email)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        return qs.exists()

    @staticmethod
    def _username_taken(username: str, exclude_id: int | None = None) -> bool:
        from authentication.models import User

        qs = User.objects.filter(username__iexact=username)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        return qs.exists()

    @classmethod
    def create_user(
        cls,
        username: str,
        email: str,
        role: str = "user",
        password: str | None = None,
    ) -> ServiceResult[User]:
        """
        Create a user.

        Without a password the account can only sign in via Google
        or a magic link.
        """
        from authentication.models import User

        email = email.strip().lower()
        username = username.strip()

        if cls._email_taken(email):
            return ServiceResult.failure(
                "User with this email already exists", error_code="EMAIL_EXISTS"
            )
        if cls._username_taken(username):
            return ServiceResult.failure(
                "User with this username already exists", error_code="USERNAME_EXISTS"
            )

        with cls.atomic():
            user = User.objects.create_user(
                email=email,
                password=password or None,
                username=username,
                role=role,
            )

        cls.get_logger().info(f"Admin created user {user.id} ({user.email})")
        return ServiceResult.success(user)

    @classmethod
    def update_user(cls, user_id: int, data: dict[str, Any]) -> ServiceResult[User]:
        """
        Partially update username, email, role and/or password.

        Keys outside UPDATABLE_FIELDS are ignored; a payload with none of them
        fails with NO_VALID_FIELDS.
        """
        from authentication.models import User

        changes = {
            key: value
            for key, value in data.items()
            if key in UPDATABLE_FIELDS and value not in (None, "")
        }
        if not changes:
            return ServiceResult.failure(
                "No valid fields to update", error_code="NO_VALID_FIELDS"
            )

        user = User.objects.filter(id=user_id).first()
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")

        if "role" in changes and changes["role"] not in User.Role.values:
            return ServiceResult.failure(
                "Role must be 'user' or 'admin'", error_code="INVALID_ROLE"
            )
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            if cls._email_taken(changes["email"], exclude_id=user.id):
                return ServiceResult.failure(
                    "User with this email already exists", error_code="EMAIL_EXISTS"
                )
        if "username" in changes:
            changes["username"] = changes["username"].strip()
            if cls._username_taken(changes["username"], exclude_id=user.id):
                return ServiceResult.failure(
                    "User with this username already exists",
                    error_code="USERNAME_EXISTS",
                )

        update_fields = ["updated_at"]
        password = changes.pop("password", None)
        if password:
            user.set_password(password)
            update_fields.append("password")
        for field, value in changes.items():
            setattr(user, field, value)
            update_fields.append(field)

        with cls.atomic():
            user.save(update_fields=update_fields)

        cls.get_logger().info(
            f"Admin updated user {user.id}: {sorted(f for f in update_fields if f != 'updated_at')}"
        )
        return ServiceResult.success(user)

    @classmethod
    def delete_user(cls, user_id: int, acting_user: User) -> ServiceResult[int]:
        """Delete a user. Admins cannot delete their own account."""
        from authentication.models import User

        if user_id == acting_user.id:
            return ServiceResult.failure(
                "Cannot delete your own account", error_code="SELF_DELETE"
            )

        user = User.objects.filter(id=user_id).first()
        if user is None:
            return ServiceResult.failure("User not found", error_code="USER_NOT_FOUND")

        email = user.email
        user.delete()
        cls.get_logger().warning(f"Admin {acting_user.id} deleted user {user_id} ({email})")
        return ServiceResult.success(user_id)
