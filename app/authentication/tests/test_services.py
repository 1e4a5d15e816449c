"""
Tests for AuthService and UserAdminService.

Test Organization:
    - Each service method has its own test class
    - Tests follow the pattern: test_<scenario>_<expected_outcome>
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from freezegun import freeze_time

from authentication.models import LoginToken, User
from authentication.services import AuthService, UserAdminService
from authentication.tests.factories import LoginTokenFactory, UserFactory


# =============================================================================
# AuthService
# =============================================================================


class TestIsAllowedEmailDomain:
    def test_default_domains_allowed(self, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag", "netnode.ch"]

        assert AuthService.is_allowed_email_domain("ana@netnode.ag")
        assert AuthService.is_allowed_email_domain("ben@NETNODE.CH")

    def test_other_domain_rejected(self, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag"]

        assert not AuthService.is_allowed_email_domain("eve@gmail.com")

    def test_subdomain_does_not_match(self, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag"]

        assert not AuthService.is_allowed_email_domain("eve@evil-netnode.ag")

    def test_missing_email_rejected(self, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag"]

        assert not AuthService.is_allowed_email_domain("")

    def test_empty_allow_list_permits_all(self, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = []

        assert AuthService.is_allowed_email_domain("eve@gmail.com")


class TestBuildLoginUrl:
    def test_url_points_at_frontend(self, settings):
        settings.FRONTEND_URL = "https://chat.example.com/"

        url = AuthService.build_login_url("abc123")

        assert url == "https://chat.example.com/auth/verify?token=abc123"


@pytest.mark.django_db
class TestRequestMagicLink:
    def test_creates_token_and_queues_email(self, user, mocker):
        mock_delay = mocker.patch("authentication.tasks.send_magic_link_email.delay")

        result = AuthService.request_magic_link("ANA@netnode.ag ")

        assert result.success
        assert result.data.user == user
        assert len(result.data.token) == 64
        mock_delay.assert_called_once_with(result.data.id)

    def test_token_expiry_uses_setting(self, user, settings, mocker):
        mocker.patch("authentication.tasks.send_magic_link_email.delay")
        settings.MAGIC_LINK_EXPIRY_MINUTES = 5

        with freeze_time("2026-01-01 12:00:00"):
            result = AuthService.request_magic_link(user.email)

            assert result.data.expires_at == timezone.now() + timedelta(minutes=5)

    def test_unknown_email_fails(self, db, mocker):
        mock_delay = mocker.patch("authentication.tasks.send_magic_link_email.delay")

        result = AuthService.request_magic_link("nobody@netnode.ag")

        assert not result.success
        assert result.error_code == "USER_NOT_FOUND"
        mock_delay.assert_not_called()

    def test_inactive_user_treated_as_unknown(self, mocker):
        mocker.patch("authentication.tasks.send_magic_link_email.delay")
        inactive = UserFactory(is_active=False)

        result = AuthService.request_magic_link(inactive.email)

        assert result.error_code == "USER_NOT_FOUND"


@pytest.mark.django_db
class TestVerifyMagicLink:
    def test_valid_token_signs_in_and_marks_used(self):
        login_token = LoginTokenFactory(user=UserFactory(email_verified=False))

        result = AuthService.verify_magic_link(login_token.token)

        assert result.success
        assert result.data == login_token.user
        login_token.refresh_from_db()
        assert login_token.used_at is not None
        result.data.refresh_from_db()
        assert result.data.email_verified

    def test_token_is_single_use(self):
        login_token = LoginTokenFactory()
        AuthService.verify_magic_link(login_token.token)

        result = AuthService.verify_magic_link(login_token.token)

        assert not result.success
        assert result.error_code == "INVALID_TOKEN"

    def test_expired_token_rejected(self):
        login_token = LoginTokenFactory()

        with freeze_time(timezone.now() + timedelta(hours=1)):
            result = AuthService.verify_magic_link(login_token.token)

        assert result.error_code == "INVALID_TOKEN"

    def test_unknown_token_rejected(self, db):
        result = AuthService.verify_magic_link("0" * 64)

        assert result.error_code == "INVALID_TOKEN"


@pytest.mark.django_db
class TestCreateLoginToken:
    def test_records_issuing_admin(self, user, admin_user):
        login_token = AuthService.create_login_token(user, created_by=admin_user)

        assert login_token.created_by == admin_user
        assert LoginToken.objects.filter(user=user).count() == 1


# =============================================================================
# UserAdminService
# =============================================================================


@pytest.mark.django_db
class TestCreateUser:
    def test_creates_user_with_role(self):
        result = UserAdminService.create_user(
            username="carla", email="Carla@NetNode.ag", role="admin", password="pw-123456"
        )

        assert result.success
        user = result.data
        assert user.email == "carla@netnode.ag"
        assert user.role == User.Role.ADMIN
        assert user.check_password("pw-123456")

    def test_without_password_user_cannot_use_credentials(self):
        result = UserAdminService.create_user(username="carla", email="carla@netnode.ag")

        assert not result.data.has_usable_password()

    def test_duplicate_email_fails(self, user):
        result = UserAdminService.create_user(username="someone", email=user.email.upper())

        assert result.error_code == "EMAIL_EXISTS"

    def test_duplicate_username_fails(self, user):
        result = UserAdminService.create_user(username="ANA", email="new@netnode.ag")

        assert result.error_code == "USERNAME_EXISTS"


@pytest.mark.django_db
class TestUpdateUser:
    def test_updates_given_fields_only(self, user):
        result = UserAdminService.update_user(user.id, {"username": "ana2", "role": "admin"})

        assert result.success
        user.refresh_from_db()
        assert user.username == "ana2"
        assert user.role == User.Role.ADMIN
        assert user.email == "ana@netnode.ag"

    def test_updates_password(self, user):
        UserAdminService.update_user(user.id, {"password": "new-password-1"})

        user.refresh_from_db()
        assert user.check_password("new-password-1")

    def test_no_valid_fields_fails(self, user):
        result = UserAdminService.update_user(user.id, {"avatar_url": "x", "email": ""})

        assert result.error_code == "NO_VALID_FIELDS"

    def test_unknown_user_fails(self, db):
        result = UserAdminService.update_user(999999, {"username": "x"})

        assert result.error_code == "USER_NOT_FOUND"

    def test_email_taken_by_other_user_fails(self, user, other_user):
        result = UserAdminService.update_user(user.id, {"email": other_user.email})

        assert result.error_code == "EMAIL_EXISTS"

    def test_keeping_own_username_is_allowed(self, user):
        result = UserAdminService.update_user(user.id, {"username": "ana"})

        assert result.success

    def test_invalid_role_fails(self, user):
        result = UserAdminService.update_user(user.id, {"role": "owner"})

        assert result.error_code == "INVALID_ROLE"


@pytest.mark.django_db
class TestDeleteUser:
    def test_deletes_user(self, user, admin_user):
        result = UserAdminService.delete_user(user.id, acting_user=admin_user)

        assert result.success
        assert not User.objects.filter(id=user.id).exists()

    def test_cannot_delete_self(self, admin_user):
        result = UserAdminService.delete_user(admin_user.id, acting_user=admin_user)

        assert result.error_code == "SELF_DELETE"
        assert User.objects.filter(id=admin_user.id).exists()

    def test_unknown_user_fails(self, admin_user):
        result = UserAdminService.delete_user(999999, acting_user=admin_user)

        assert result.error_code == "USER_NOT_FOUND"
