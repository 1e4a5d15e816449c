"""
Tests for realtime channel subscription rules.
"""

import pytest

from chat.authorization import ChatAuthorizationService
from chat.tests.factories import MessageFactory


@pytest.mark.django_db
class TestCanSubscribe:
    def test_existing_room(self, user, room):
        assert ChatAuthorizationService.can_subscribe(user, f"chat-{room.id}") == (True, "")

    def test_missing_room(self, user):
        allowed, reason = ChatAuthorizationService.can_subscribe(user, "chat-999999")

        assert not allowed
        assert reason == "Room not found"

    def test_existing_thread(self, user):
        message = MessageFactory()

        allowed, _ = ChatAuthorizationService.can_subscribe(user, f"thread-{message.id}")

        assert allowed

    def test_missing_thread(self, user):
        allowed, reason = ChatAuthorizationService.can_subscribe(user, "thread-999999")

        assert not allowed
        assert reason == "Message not found"

    def test_own_dm(self, user, other_user):
        low, high = sorted((user.id, other_user.id))

        allowed, _ = ChatAuthorizationService.can_subscribe(user, f"dm-{low}-{high}")

        assert allowed

    def test_someone_elses_dm(self, user, other_user, third_user):
        low, high = sorted((other_user.id, third_user.id))

        allowed, reason = ChatAuthorizationService.can_subscribe(user, f"dm-{low}-{high}")

        assert not allowed
        assert reason == "Not a participant in this conversation"

    def test_own_user_channel(self, user):
        assert ChatAuthorizationService.can_subscribe(user, f"user-{user.id}")[0]

    def test_other_user_channel(self, user, other_user):
        allowed, _ = ChatAuthorizationService.can_subscribe(user, f"user-{other_user.id}")

        assert not allowed

    def test_unknown_channel(self, user):
        assert ChatAuthorizationService.can_subscribe(user, "lobby") == (
            False,
            "Unknown channel",
        )
