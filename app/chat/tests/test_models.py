"""
Tests for chat models.
"""

import pytest
from django.db import IntegrityError
from django.utils import timezone

from chat.models import Room
from chat.tests.factories import (
    DirectMessageFactory,
    MessageFactory,
    MessageMentionFactory,
    ReplyFactory,
    RoomFactory,
)


@pytest.mark.django_db
class TestRoom:
    def test_str(self):
        assert str(RoomFactory(name="design")) == "#design"

    def test_name_unique_ignoring_case(self):
        RoomFactory(name="Design")

        with pytest.raises(IntegrityError):
            Room.objects.create(name="design")

    def test_ordered_by_name(self):
        RoomFactory(name="zeta")
        RoomFactory(name="alpha")

        assert list(Room.objects.values_list("name", flat=True)) == ["alpha", "zeta"]


@pytest.mark.django_db
class TestMessage:
    def test_top_level_message(self):
        message = MessageFactory()

        assert not message.is_reply
        assert not message.has_file
        assert message.reply_count == 0

    def test_reply(self):
        reply = ReplyFactory()

        assert reply.is_reply
        assert reply.room_id == reply.parent_message.room_id

    def test_file_message(self):
        message = MessageFactory(
            content="",
            file_name="report.pdf",
            file_url="https://files.example.com/uploads/report.pdf",
            file_type="application/pdf",
            file_size=2048,
        )

        assert message.has_file

    def test_deleting_room_deletes_messages(self):
        message = MessageFactory()

        message.room.delete()

        assert not type(message).objects.filter(id=message.id).exists()


@pytest.mark.django_db
class TestDirectMessage:
    def test_is_read(self):
        message = DirectMessageFactory()
        assert not message.is_read

        message.read_at = timezone.now()
        assert message.is_read


@pytest.mark.django_db
class TestMessageMention:
    def test_one_mention_per_user_and_message(self):
        mention = MessageMentionFactory()

        with pytest.raises(IntegrityError):
            MessageMentionFactory(
                message=mention.message, mentioned_user=mention.mentioned_user
            )
