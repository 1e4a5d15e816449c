"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get("/api/v1/auth/user/")
        assert response.status_code == 200
"""

import pytest

from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    return UserFactory(email="ana@netnode.ag", username="ana")


@pytest.fixture
def other_user(db):
    return UserFactory(email="ben@netnode.ag", username="ben")


@pytest.fixture
def admin_user(db):
    """User with the chat admin role (not a Django superuser)."""
    return UserFactory(email="ops@netnode.ag", username="ops", role=User.Role.ADMIN)


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    return authenticated_client_factory(user)


@pytest.fixture
def admin_client(authenticated_client_factory, admin_user):
    return authenticated_client_factory(admin_user)
