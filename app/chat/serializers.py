"""
Serializers for chat API.

Output:
    RoomSerializer, MessageSerializer, ThreadSerializer,
    DirectMessageSerializer, UnreadCountsSerializer

Input:
    RoomCreateSerializer, MessageCreateSerializer,
    DirectMessageCreateSerializer, MarkDirectReadSerializer

Message output includes two derived fields:
    mentions: text/mention segments for highlighting (see chat.mentions)
    youtube:  previews for YouTube links in the content (see chat.links)
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSummarySerializer
from chat.constants import MESSAGE_CONFIG, ROOM_CONFIG
from chat.links import find_youtube_links
from chat.mentions import highlight_mentions
from chat.models import DirectMessage, Message, Room

FILE_FIELDS = ["file_name", "file_url", "file_type", "file_size"]


# =============================================================================
# Rooms
# =============================================================================


class RoomSerializer(serializers.ModelSerializer):
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Room
        fields = ["id", "name", "description", "created_by_id", "created_at"]
        read_only_fields = fields


class RoomCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=ROOM_CONFIG.MAX_NAME_LENGTH)
    description = serializers.CharField(required=False, allow_blank=True, default="")


# =============================================================================
# Messages
# =============================================================================


class YouTubePreviewField(serializers.Field):
    """Read-only list of YouTube previews derived from content."""

    def __init__(self, **kwargs):
        kwargs["source"] = "content"
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return [preview.to_dict() for preview in find_youtube_links(value)]


class MessageSerializer(serializers.ModelSerializer):
    """
    Room message with sender summary, mention segments and link previews.

    Mentions are highlighted against the users recorded in MessageMention,
    so querysets should prefetch "mentions__mentioned_user".
    """

    room_id = serializers.IntegerField(read_only=True)
    sender = UserSummarySerializer(read_only=True)
    parent_message_id = serializers.IntegerField(read_only=True, allow_null=True)
    mentions = serializers.SerializerMethodField()
    youtube = YouTubePreviewField()

    class Meta:
        model = Message
        fields = [
            "id",
            "room_id",
            "sender",
            "content",
            "parent_message_id",
            "reply_count",
            "last_reply_at",
            *FILE_FIELDS,
            "created_at",
            "mentions",
            "youtube",
        ]
        read_only_fields = fields

    def get_mentions(self, obj: Message) -> list[dict]:
        users = [mention.mentioned_user for mention in obj.mentions.all()]
        return highlight_mentions(obj.content, users)


class ThreadSerializer(serializers.Serializer):
    parent_message = MessageSerializer(read_only=True)
    replies = MessageSerializer(many=True, read_only=True)


class AttachmentInputSerializer(serializers.Serializer):
    """
    Message body shared by room and direct messages.

    Either content or file_url must be present.
    """

    content = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        default="",
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        error_messages={
            "max_length": (
                f"Message content cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters"
            ),
        },
    )
    file_name = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )
    file_url = serializers.URLField(
        required=False, allow_blank=True, default="", max_length=1024
    )
    file_type = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=127
    )
    file_size = serializers.IntegerField(
        required=False, allow_null=True, default=None, min_value=0
    )

    def validate(self, attrs):
        if not attrs.get("content", "").strip() and not attrs.get("file_url"):
            raise serializers.ValidationError(
                {"content": "Message content or file is required"}
            )
        return attrs


class MessageCreateSerializer(AttachmentInputSerializer):
    parent_message_id = serializers.IntegerField(
        required=False, allow_null=True, default=None
    )


# =============================================================================
# Direct Messages
# =============================================================================


class DirectMessageSerializer(serializers.ModelSerializer):
    sender_id = serializers.IntegerField(read_only=True)
    receiver_id = serializers.IntegerField(read_only=True)
    sender_username = serializers.CharField(source="sender.username", read_only=True)
    receiver_username = serializers.CharField(source="receiver.username", read_only=True)
    youtube = YouTubePreviewField()

    class Meta:
        model = DirectMessage
        fields = [
            "id",
            "sender_id",
            "receiver_id",
            "sender_username",
            "receiver_username",
            "content",
            *FILE_FIELDS,
            "read_at",
            "created_at",
            "youtube",
        ]
        read_only_fields = fields


class DirectMessageCreateSerializer(AttachmentInputSerializer):
    receiver_id = serializers.IntegerField(min_value=1)


class MarkDirectReadSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)


class MarkedReadSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()


# =============================================================================
# Unread
# =============================================================================


class UnreadCountsSerializer(serializers.Serializer):
    """Badge counts keyed by room id and by sender id."""

    rooms = serializers.DictField(child=serializers.IntegerField())
    direct = serializers.DictField(child=serializers.IntegerField())
    rooms_display = serializers.DictField(child=serializers.CharField())
    direct_display = serializers.DictField(child=serializers.CharField())
