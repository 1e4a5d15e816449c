"""
Tests for the allauth adapters (Google sign-in rules).
"""

from unittest.mock import MagicMock

import pytest
from rest_framework.exceptions import PermissionDenied

from authentication.adapters import CustomAccountAdapter, CustomSocialAccountAdapter
from authentication.models import User
from authentication.tests.factories import UserFactory


def make_sociallogin(email, extra_data=None):
    sociallogin = MagicMock()
    sociallogin.user = User(email=email)
    sociallogin.account.extra_data = extra_data or {}
    sociallogin.account.provider = "google"
    return sociallogin


class TestCustomAccountAdapter:
    def test_signup_closed(self, rf):
        assert CustomAccountAdapter().is_open_for_signup(rf.get("/")) is False


@pytest.mark.django_db
class TestPreSocialLogin:
    def test_disallowed_domain_rejected(self, rf, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag"]
        sociallogin = make_sociallogin("eve@gmail.com")

        with pytest.raises(PermissionDenied):
            CustomSocialAccountAdapter().pre_social_login(rf.get("/"), sociallogin)

    def test_email_from_extra_data_is_checked(self, rf, settings):
        settings.GOOGLE_ALLOWED_DOMAINS = ["netnode.ag"]
        sociallogin = make_sociallogin("", extra_data={"email": "eve@gmail.com"})

        with pytest.raises(PermissionDenied):
            CustomSocialAccountAdapter().pre_social_login(rf.get("/"), sociallogin)


@pytest.mark.django_db
class TestPopulateUser:
    def test_username_and_avatar_from_google_profile(self, rf, mocker):
        sociallogin = make_sociallogin(
            "ana@netnode.ag",
            extra_data={"name": "Ana Lopez", "picture": "https://img.example.com/a.png"},
        )
        mocker.patch(
            "allauth.socialaccount.adapter.DefaultSocialAccountAdapter.populate_user",
            return_value=User(email="ana@netnode.ag"),
        )

        user = CustomSocialAccountAdapter().populate_user(rf.get("/"), sociallogin, {})

        assert user.username == "Ana Lopez"
        assert user.avatar_url == "https://img.example.com/a.png"
        assert user.role == User.Role.USER

    def test_username_deduplicated(self, rf, mocker):
        UserFactory(username="Ana Lopez")
        sociallogin = make_sociallogin("ana2@netnode.ag", extra_data={"name": "Ana Lopez"})
        mocker.patch(
            "allauth.socialaccount.adapter.DefaultSocialAccountAdapter.populate_user",
            return_value=User(email="ana2@netnode.ag"),
        )

        user = CustomSocialAccountAdapter().populate_user(rf.get("/"), sociallogin, {})

        assert user.username == "Ana Lopez2"

    def test_falls_back_to_email_local_part(self, rf, mocker):
        sociallogin = make_sociallogin("carla@netnode.ag")
        mocker.patch(
            "allauth.socialaccount.adapter.DefaultSocialAccountAdapter.populate_user",
            return_value=User(email="carla@netnode.ag"),
        )

        user = CustomSocialAccountAdapter().populate_user(rf.get("/"), sociallogin, {})

        assert user.username == "carla"
        assert user.avatar_url == ""
