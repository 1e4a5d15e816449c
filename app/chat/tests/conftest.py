"""
Test configuration and fixtures for chat tests.

Usage:
    def test_example(room, authenticated_client):
        response = authenticated_client.get(f"/api/v1/chat/rooms/{room.id}/messages/")
        assert response.status_code == 200
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.tests.factories import RoomFactory
from notifications.tests.factories import NotificationTypeFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    return UserFactory(username="ana", email="ana@netnode.ag")


@pytest.fixture
def other_user(db):
    return UserFactory(username="ben", email="ben@netnode.ag")


@pytest.fixture
def third_user(db):
    return UserFactory(username="Jane Doe", email="jane@netnode.ch")


# =============================================================================
# Room Fixtures
# =============================================================================


@pytest.fixture
def room(db):
    return RoomFactory(name="general", description="Default room for everyone", created_by=None)


@pytest.fixture
def other_room(db):
    return RoomFactory(name="random")


# =============================================================================
# API Clients
# =============================================================================


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    return authenticated_client_factory(user)


@pytest.fixture
def other_client(authenticated_client_factory, other_user):
    return authenticated_client_factory(other_user)


# =============================================================================
# Side Effects
# =============================================================================


@pytest.fixture
def mock_publish(mocker):
    """Capture realtime events published by the chat services."""
    return mocker.patch("chat.services.publish")


@pytest.fixture
def chat_task_delays(mocker):
    return {
        "mention": mocker.patch("chat.tasks.send_mention_notifications.delay"),
        "direct": mocker.patch("chat.tasks.send_direct_message_notification.delay"),
    }


@pytest.fixture
def notification_types(db):
    """The seeded notification types (migrations do not run in tests)."""
    return {
        "mention": NotificationTypeFactory(
            key="mention",
            display_name="Mention",
            title_template="{sender_name} mentioned you",
            body_template="{preview}",
        ),
        "direct_message": NotificationTypeFactory(
            key="direct_message",
            display_name="Direct message",
            title_template="New message from {sender_name}",
            body_template="{preview}",
        ),
    }
