"""
Fixtures for notification tests.

Migrations are disabled in tests, so the seeded notification types are
created here with the same keys and templates.
"""

import pytest

from authentication.tests.factories import UserFactory
from notifications.tests.factories import NotificationTypeFactory


@pytest.fixture
def user(db):
    return UserFactory(username="ana", email="ana@netnode.ag")


@pytest.fixture
def other_user(db):
    return UserFactory(username="ben", email="ben@netnode.ag")


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    return authenticated_client_factory(user)


@pytest.fixture
def mention_type(db):
    return NotificationTypeFactory(
        key="mention",
        display_name="Mention",
        title_template="{sender_name} mentioned you",
        body_template="{preview}",
    )


@pytest.fixture
def direct_message_type(db):
    return NotificationTypeFactory(
        key="direct_message",
        display_name="Direct message",
        title_template="New message from {sender_name}",
        body_template="{preview}",
    )


@pytest.fixture
def onesignal_settings(settings):
    settings.ONESIGNAL_APP_ID = "app-123"
    settings.ONESIGNAL_REST_API_KEY = "key-456"
    return settings


@pytest.fixture
def mock_task_delays(mocker):
    """Stop create_notification from dispatching delivery tasks."""
    return {
        "push": mocker.patch("notifications.tasks.send_push_notification.delay"),
        "websocket": mocker.patch(
            "notifications.tasks.broadcast_websocket_notification.delay"
        ),
    }
