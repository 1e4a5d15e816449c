"""
Serializers for authentication.

- UserSerializer: user directory entries and dj-rest-auth's /auth/user/
- AdminUserCreateSerializer / AdminUserUpdateSerializer: admin user management
- MagicLinkRequestSerializer / MagicLinkVerifySerializer: magic-link login
- LoginResponseSerializer / LoginLinkSerializer: response documentation

Security:
    - Password fields are write-only
    - role is restricted to the User.Role choices
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Public user representation.

    Used by dj-rest-auth for /api/v1/auth/user/ and by the user directory.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "role",
            "avatar_url",
            "email_verified",
            "date_joined",
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user shape embedded in chat messages."""

    class Meta:
        model = User
        fields = ["id", "username", "avatar_url"]
        read_only_fields = fields


class AdminUserCreateSerializer(serializers.Serializer):
    """
    Admin: create a user.

    password is optional; without it the user signs in with Google or a
    magic link only.
    """

    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    role = serializers.ChoiceField(choices=User.Role.choices, default=User.Role.USER)
    password = serializers.CharField(
        write_only=True,
        required=False,
        allow_blank=True,
        min_length=8,
        style={"input_type": "password"},
    )

    def validate_username(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Username cannot be blank.")
        return value


class AdminUserUpdateSerializer(serializers.Serializer):
    """
    Admin: partial user update.

    All fields optional; UserAdminService rejects an empty update.
    """

    username = serializers.CharField(max_length=150, required=False)
    email = serializers.EmailField(required=False)
    role = serializers.ChoiceField(choices=User.Role.choices, required=False)
    password = serializers.CharField(
        write_only=True,
        required=False,
        min_length=8,
        style={"input_type": "password"},
    )


class MagicLinkRequestSerializer(serializers.Serializer):
    email = serializers.EmailField(
        error_messages={"required": "Email is required", "blank": "Email is required"}
    )


class MagicLinkVerifySerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class LoginResponseSerializer(serializers.Serializer):
    """JWT pair plus the signed-in user."""

    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class LoginLinkSerializer(serializers.Serializer):
    """Admin-generated magic link."""

    url = serializers.CharField()
    expires_at = serializers.DateTimeField()
