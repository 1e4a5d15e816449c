"""
Tests for chat API views.

Test Organization:
    - One class per endpoint group
    - Tests follow pattern: test_<method>_<scenario>
"""

import pytest
from django.utils import timezone
from freezegun import freeze_time
from rest_framework import status

from chat.models import DirectMessage, Message, Room
from chat.tests.factories import (
    DirectMessageFactory,
    MessageFactory,
    MessageMentionFactory,
    ReplyFactory,
    RoomFactory,
)


# =============================================================================
# URL Constants
# =============================================================================


ROOMS_URL = "/api/v1/chat/rooms/"
DIRECT_MESSAGES_URL = "/api/v1/chat/direct-messages/"
DIRECT_MESSAGES_READ_URL = "/api/v1/chat/direct-messages/read/"
UNREAD_URL = "/api/v1/chat/unread/"


def room_url(room_id):
    return f"{ROOMS_URL}{room_id}/"


def messages_url(room_id):
    return f"{ROOMS_URL}{room_id}/messages/"


def mentions_read_url(room_id):
    return f"{ROOMS_URL}{room_id}/mentions/read/"


def thread_url(message_id):
    return f"/api/v1/chat/threads/{message_id}/"


@pytest.fixture(autouse=True)
def quiet_side_effects(mock_publish, chat_task_delays):
    """Views are tested without realtime publishing or notification tasks."""


# =============================================================================
# Rooms
# =============================================================================


@pytest.mark.django_db
class TestRooms:
    def test_list_requires_authentication(self, api_client):
        response = api_client.get(ROOMS_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list(self, authenticated_client, room, other_room):
        response = authenticated_client.get(ROOMS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert [r["name"] for r in response.data] == ["general", "random"]

    def test_retrieve(self, authenticated_client, room):
        response = authenticated_client.get(room_url(room.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["name"] == "general"
        assert response.data["created_by_id"] is None

    def test_retrieve_missing(self, authenticated_client):
        response = authenticated_client.get(room_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create(self, authenticated_client, user):
        response = authenticated_client.post(
            ROOMS_URL, {"name": "design", "description": "UI talk"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["name"] == "design"
        assert response.data["created_by_id"] == user.id
        assert Room.objects.filter(name="design").exists()

    def test_create_duplicate_name(self, authenticated_client, room):
        response = authenticated_client.post(ROOMS_URL, {"name": "GENERAL"}, format="json")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data["error_code"] == "ROOM_EXISTS"

    def test_create_blank_name(self, authenticated_client):
        response = authenticated_client.post(ROOMS_URL, {"name": ""}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Room Messages
# =============================================================================


@pytest.mark.django_db
class TestRoomMessages:
    def test_list_top_level_oldest_first(self, authenticated_client, room):
        first = MessageFactory(room=room, content="first")
        ReplyFactory(parent_message=first, content="in thread")
        second = MessageFactory(room=room, content="second")

        response = authenticated_client.get(messages_url(room.id))

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.data] == [first.id, second.id]

    def test_message_shape(self, authenticated_client, room, user, other_user):
        message = MessageFactory(
            room=room,
            sender=user,
            content="@ben see https://youtu.be/dQw4w9WgXcQ",
        )
        MessageMentionFactory(message=message, mentioned_user=other_user)

        response = authenticated_client.get(messages_url(room.id))

        item = response.data[0]
        assert item["sender"] == {"id": user.id, "username": "ana", "avatar_url": user.avatar_url}
        assert item["mentions"][0] == {
            "type": "mention",
            "text": "@ben",
            "user_id": other_user.id,
        }
        assert item["youtube"][0]["video_id"] == "dQw4w9WgXcQ"
        assert item["reply_count"] == 0

    def test_send(self, authenticated_client, room, user):
        response = authenticated_client.post(
            messages_url(room.id), {"content": "Hello"}, format="json"
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["content"] == "Hello"
        assert response.data["sender"]["id"] == user.id
        assert response.data["room_id"] == room.id

    def test_send_duplicate_returns_original(self, authenticated_client, room):
        # Frozen at the real current time so the JWT is not issued in the future
        with freeze_time(timezone.now()):
            first = authenticated_client.post(
                messages_url(room.id), {"content": "Hello"}, format="json"
            )
            second = authenticated_client.post(
                messages_url(room.id), {"content": "Hello"}, format="json"
            )

        assert second.status_code == status.HTTP_200_OK
        assert second.data["id"] == first.data["id"]
        assert Message.objects.count() == 1

    def test_send_file(self, authenticated_client, room):
        response = authenticated_client.post(
            messages_url(room.id),
            {
                "file_name": "report.pdf",
                "file_url": "https://files.example.com/uploads/report.pdf",
                "file_type": "application/pdf",
                "file_size": 2048,
            },
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["file_name"] == "report.pdf"
        assert response.data["content"] == ""

    def test_send_reply(self, authenticated_client, room):
        parent = MessageFactory(room=room)

        response = authenticated_client.post(
            messages_url(room.id),
            {"content": "agreed", "parent_message_id": parent.id},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["parent_message_id"] == parent.id

    def test_send_reply_to_other_room(self, authenticated_client, room, other_room):
        parent = MessageFactory(room=other_room)

        response = authenticated_client.post(
            messages_url(room.id),
            {"content": "agreed", "parent_message_id": parent.id},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "INVALID_PARENT"

    def test_send_empty(self, authenticated_client, room):
        response = authenticated_client.post(
            messages_url(room.id), {"content": "   "}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Message.objects.exists()

    def test_send_too_long(self, authenticated_client, room):
        response = authenticated_client.post(
            messages_url(room.id), {"content": "x" * 10001}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_send_to_missing_room(self, authenticated_client):
        response = authenticated_client.post(
            messages_url(999999), {"content": "Hello"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestThreads:
    def test_get_thread(self, authenticated_client, room):
        parent = MessageFactory(room=room)
        reply = ReplyFactory(parent_message=parent)

        response = authenticated_client.get(thread_url(parent.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["parent_message"]["id"] == parent.id
        assert [r["id"] for r in response.data["replies"]] == [reply.id]

    def test_get_missing_thread(self, authenticated_client):
        response = authenticated_client.get(thread_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "MESSAGE_NOT_FOUND"


# =============================================================================
# Direct Messages
# =============================================================================


@pytest.mark.django_db
class TestDirectMessages:
    def test_list_conversation(self, authenticated_client, user, other_user, third_user):
        sent = DirectMessageFactory(sender=user, receiver=other_user)
        received = DirectMessageFactory(sender=other_user, receiver=user)
        DirectMessageFactory(sender=third_user, receiver=user)

        response = authenticated_client.get(DIRECT_MESSAGES_URL, {"user_id": other_user.id})

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.data] == [sent.id, received.id]
        assert response.data[0]["receiver_username"] == "ben"

    @pytest.mark.parametrize("user_id", [None, "abc", "0"])
    def test_list_requires_valid_user_id(self, authenticated_client, user_id):
        params = {} if user_id is None else {"user_id": user_id}

        response = authenticated_client.get(DIRECT_MESSAGES_URL, params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "INVALID_USER_ID"

    def test_send(self, authenticated_client, user, other_user):
        response = authenticated_client.post(
            DIRECT_MESSAGES_URL,
            {"receiver_id": other_user.id, "content": "hey"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["sender_id"] == user.id
        assert response.data["receiver_id"] == other_user.id
        assert response.data["read_at"] is None

    def test_send_to_self(self, authenticated_client, user):
        response = authenticated_client.post(
            DIRECT_MESSAGES_URL, {"receiver_id": user.id, "content": "hey"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "SELF_MESSAGE"

    def test_send_to_unknown_user(self, authenticated_client):
        response = authenticated_client.post(
            DIRECT_MESSAGES_URL, {"receiver_id": 999999, "content": "hey"}, format="json"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data["error_code"] == "RECEIVER_NOT_FOUND"

    def test_send_empty(self, authenticated_client, other_user):
        response = authenticated_client.post(
            DIRECT_MESSAGES_URL, {"receiver_id": other_user.id}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not DirectMessage.objects.exists()

    def test_mark_read(self, authenticated_client, user, other_user):
        DirectMessageFactory.create_batch(2, sender=other_user, receiver=user)

        response = authenticated_client.post(
            DIRECT_MESSAGES_READ_URL, {"user_id": other_user.id}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked_count": 2}
        assert not DirectMessage.objects.filter(read_at__isnull=True).exists()


# =============================================================================
# Unread
# =============================================================================


@pytest.mark.django_db
class TestUnread:
    def test_counts(self, authenticated_client, user, other_user, room):
        for _ in range(10):
            MessageMentionFactory(message=MessageFactory(room=room), mentioned_user=user)
        DirectMessageFactory(sender=other_user, receiver=user)

        response = authenticated_client.get(UNREAD_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["rooms"] == {str(room.id): 10}
        assert response.data["rooms_display"] == {str(room.id): "9+"}
        assert response.data["direct"] == {str(other_user.id): 1}
        assert response.data["direct_display"] == {str(other_user.id): "1"}

    def test_mark_room_mentions_read(self, authenticated_client, user, room):
        MessageMentionFactory(message=MessageFactory(room=room), mentioned_user=user)

        response = authenticated_client.post(mentions_read_url(room.id))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {"marked_count": 1}

        unread = authenticated_client.get(UNREAD_URL)
        assert unread.data["rooms"] == {}

    def test_mark_mentions_read_missing_room(self, authenticated_client):
        response = authenticated_client.post(mentions_read_url(999999))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_other_rooms_unaffected(self, authenticated_client, user, room):
        elsewhere = RoomFactory(name="elsewhere")
        MessageMentionFactory(message=MessageFactory(room=elsewhere), mentioned_user=user)

        authenticated_client.post(mentions_read_url(room.id))

        unread = authenticated_client.get(UNREAD_URL)
        assert unread.data["rooms"] == {str(elsewhere.id): 1}
