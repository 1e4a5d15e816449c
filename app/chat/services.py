"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all operations on rooms, messages, direct messages and mentions.

Services:
    RoomService: Room listing and creation, default room
    MessageService: Room messages and threads
    DirectMessageService: One-to-one messages and read state
    MentionService: Mention recording and read state
    UnreadService: Badge counts across rooms and direct messages

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - Realtime events and notification tasks are dispatched after the
      database transaction has completed

Usage:
    from chat.services import MessageService

    result = MessageService.send_message(room=room, sender=user, content="Hello @bob")
    if result.success:
        message, created = result.data.message, result.data.created
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from core.helpers import cap_count
from core.services import BaseService, ServiceResult

from chat.constants import MESSAGE_CONFIG, ROOM_CONFIG, UNREAD_CONFIG
from chat.dedup import MessageSnapshot, is_duplicate
from chat.mentions import find_mentioned_users
from chat.models import DirectMessage, Message, MessageMention, Room
from chat.realtime import (
    EVENT_MESSAGE,
    EVENT_REPLY,
    EVENT_THREAD_UPDATE,
    dm_channel,
    publish,
    room_channel,
    thread_channel,
)

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from authentication.models import User

logger = logging.getLogger(__name__)


@dataclass
class SentMessage:
    """
    Outcome of a send.

    created is False when the send was recognised as a duplicate of a message
    the sender posted moments ago; message is then that earlier message.
    """

    message: Any
    created: bool


def _validate_body(content: str, file_url: str) -> ServiceResult | None:
    if not (content or "").strip() and not file_url:
        return ServiceResult.failure(
            "Message content or file is required",
            error_code="EMPTY_MESSAGE",
        )
    if len(content or "") > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
        return ServiceResult.failure(
            f"Message content cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
            error_code="CONTENT_TOO_LONG",
        )
    return None


def _find_duplicate(queryset, sender_id: int, content: str, file_url: str, now):
    """Most recent message in queryset that duplicates the incoming one, if any."""
    window = timedelta(milliseconds=MESSAGE_CONFIG.DUPLICATE_WINDOW_MS)
    incoming = MessageSnapshot(
        id=None,
        sender_id=sender_id,
        content=content,
        file_url=file_url,
        timestamp=now,
    )
    for candidate in queryset.filter(created_at__gte=now - window).order_by("-created_at"):
        if is_duplicate(incoming, MessageSnapshot.from_message(candidate)):
            return candidate
    return None


def _lock_sender(sender: User) -> None:
    """Serialize concurrent sends from one user so duplicate checks see each other."""
    get_user_model().objects.select_for_update().filter(pk=sender.pk).first()


class RoomService(BaseService):
    """
    Service for rooms.

    Methods:
        list_rooms: All rooms ordered by name
        get_default_room: The "general" room, created if missing
        create_room: Create a room with a case-insensitively unique name
    """

    @classmethod
    def list_rooms(cls) -> QuerySet[Room]:
        return Room.objects.order_by("name")

    @classmethod
    def get_default_room(cls) -> Room:
        room = Room.objects.filter(name__iexact=ROOM_CONFIG.DEFAULT_ROOM_NAME).first()
        if room is None:
            room = Room.objects.create(
                name=ROOM_CONFIG.DEFAULT_ROOM_NAME,
                description="Default room for everyone",
            )
            cls.get_logger().info(f"Created default room {room.id}")
        return room

    @classmethod
    def create_room(
        cls,
        name: str,
        description: str = "",
        created_by: User | None = None,
    ) -> ServiceResult[Room]:
        """
        Create a new room.

        Error codes:
            INVALID_NAME: Name is blank
            ROOM_EXISTS: A room with this name (any case) exists
        """
        name = (name or "").strip()
        if not name:
            return ServiceResult.failure("Room name is required", error_code="INVALID_NAME")

        if Room.objects.filter(name__iexact=name).exists():
            return ServiceResult.failure(
                "Room name already exists", error_code="ROOM_EXISTS"
            )

        try:
            with transaction.atomic():
                room = Room.objects.create(
                    name=name,
                    description=description or "",
                    created_by=created_by,
                )
        except IntegrityError:
            return ServiceResult.failure(
                "Room name already exists", error_code="ROOM_EXISTS"
            )

        creator = created_by.id if created_by else "system"
        cls.get_logger().info(f"Room {room.id} '{room.name}' created by {creator}")
        return ServiceResult.success(room)


class MentionService(BaseService):
    """
    Service for @mentions in room messages.

    Methods:
        record_mentions: Resolve and store mentions for a new message
        mark_room_read: Mark the user's mentions in a room as read
        unread_counts: Unread mentions per room for a user
    """

    @classmethod
    def record_mentions(cls, message: Message) -> list[MessageMention]:
        """
        Resolve mentions in message content against all active users.

        The sender is never recorded as mentioning themselves.
        """
        if "@" not in (message.content or ""):
            return []

        User = get_user_model()
        candidates = (
            User.objects.filter(is_active=True)
            .exclude(id=message.sender_id)
            .only("id", "username")
        )
        mentioned = find_mentioned_users(message.content, candidates)
        if not mentioned:
            return []

        MessageMention.objects.bulk_create(
            [MessageMention(message=message, mentioned_user=user) for user in mentioned],
            ignore_conflicts=True,
        )
        mentions = list(
            MessageMention.objects.filter(message=message).select_related("mentioned_user")
        )

        cls.get_logger().debug(
            f"Message {message.id} mentions users {[user.id for user in mentioned]}"
        )
        return mentions

    @classmethod
    def mark_room_read(cls, user: User, room_id: int) -> ServiceResult[int]:
        """
        Mark every unread mention of user in the room as read.

        Error codes:
            ROOM_NOT_FOUND: Room does not exist
        """
        if not Room.objects.filter(id=room_id).exists():
            return ServiceResult.failure("Room not found", error_code="ROOM_NOT_FOUND")

        count = MessageMention.objects.filter(
            mentioned_user=user,
            message__room_id=room_id,
            read_at__isnull=True,
        ).update(read_at=timezone.now())

        cls.get_logger().debug(f"User {user.id} read {count} mentions in room {room_id}")
        return ServiceResult.success(count)

    @classmethod
    def unread_counts(cls, user: User) -> dict[int, int]:
        rows = (
            MessageMention.objects.filter(mentioned_user=user, read_at__isnull=True)
            .values("message__room_id")
            .annotate(count=Count("id"))
        )
        return {row["message__room_id"]: row["count"] for row in rows}


class MessageService(BaseService):
    """
    Service for room messages.

    Methods:
        send_message: Post a message or reply to a room
        list_messages: Top-level messages of a room
        get_thread: Root message and its replies
    """

    @classmethod
    def send_message(
        cls,
        room: Room,
        sender: User,
        content: str = "",
        parent_message_id: int | None = None,
        file_name: str = "",
        file_url: str = "",
        file_type: str = "",
        file_size: int | None = None,
    ) -> ServiceResult[SentMessage]:
        """
        Send a message to a room.

        Threading behavior:
        - If parent_message is a reply, the new message references the root
          message instead (single-level threading).

        Duplicate suppression:
        - If the sender posted the same text (or the same file) to the same
          room and thread within the duplicate window, that message is
          returned with created=False and nothing else happens.

        Side effects (new messages only):
        - Reply: parent reply_count/last_reply_at updated, "thread-update" on
          the room channel and "reply" on the thread channel
        - Top-level: "message" on the room channel
        - Mentions recorded and notified

        Error codes:
            EMPTY_MESSAGE: Neither content nor file
            CONTENT_TOO_LONG: Content exceeds the maximum length
            INVALID_PARENT: Parent message not in this room
        """
        from chat import tasks

        content = content or ""
        file_url = file_url or ""

        error = _validate_body(content, file_url)
        if error is not None:
            return error

        parent_message = None
        if parent_message_id:
            parent_message = (
                Message.objects.filter(id=parent_message_id, room=room)
                .select_related("parent_message")
                .first()
            )
            if parent_message is None:
                return ServiceResult.failure(
                    "Parent message not found in this room",
                    error_code="INVALID_PARENT",
                )
            # Flatten threading: if parent is a reply, use its parent instead
            if parent_message.parent_message_id:
                parent_message = parent_message.parent_message

        with transaction.atomic():
            _lock_sender(sender)

            now = timezone.now()
            duplicate = _find_duplicate(
                Message.objects.filter(
                    room=room, sender=sender, parent_message=parent_message
                ),
                sender.id,
                content,
                file_url,
                now,
            )
            if duplicate is not None:
                cls.get_logger().info(
                    f"Duplicate message from user {sender.id} in room {room.id}, "
                    f"returning message {duplicate.id}"
                )
                return ServiceResult.success(SentMessage(duplicate, created=False))

            message = Message.objects.create(
                room=room,
                sender=sender,
                content=content,
                parent_message=parent_message,
                file_name=file_name or "",
                file_url=file_url,
                file_type=file_type or "",
                file_size=file_size,
            )

            if parent_message:
                Message.objects.filter(id=parent_message.id).update(
                    reply_count=F("reply_count") + 1,
                    last_reply_at=message.created_at,
                )
                parent_message.refresh_from_db(fields=["reply_count", "last_reply_at"])

            mentions = MentionService.record_mentions(message)

        cls.get_logger().debug(
            f"User {sender.id} sent message {message.id} to room {room.id}"
        )

        cls._publish(message, parent_message)

        if mentions:
            tasks.send_mention_notifications.delay(message.id)

        return ServiceResult.success(SentMessage(message, created=True))

    @classmethod
    def _publish(cls, message: Message, parent_message: Message | None) -> None:
        from chat.serializers import MessageSerializer

        data = MessageSerializer(message).data
        if parent_message is None:
            publish(room_channel(message.room_id), EVENT_MESSAGE, data)
            return

        publish(
            room_channel(message.room_id),
            EVENT_THREAD_UPDATE,
            {
                "parentMessageId": parent_message.id,
                "newReplyCount": parent_message.reply_count,
                "lastReplyTimestamp": parent_message.last_reply_at.isoformat(),
            },
        )
        publish(thread_channel(parent_message.id), EVENT_REPLY, data)

    @classmethod
    def _with_relations(cls, queryset):
        return queryset.select_related("sender").prefetch_related(
            "mentions__mentioned_user"
        )

    @classmethod
    def list_messages(cls, room: Room) -> QuerySet[Message]:
        """Top-level messages of a room, oldest first."""
        return cls._with_relations(
            Message.objects.filter(room=room, parent_message__isnull=True)
        ).order_by("created_at", "id")

    @classmethod
    def get_thread(cls, parent_id: int) -> ServiceResult[dict]:
        """
        Get a message and its replies, oldest first.

        Error codes:
            MESSAGE_NOT_FOUND: Parent message does not exist
        """
        parent = cls._with_relations(Message.objects.filter(id=parent_id)).first()
        if parent is None:
            return ServiceResult.failure(
                "Parent message not found", error_code="MESSAGE_NOT_FOUND"
            )

        replies = cls._with_relations(parent.replies.all()).order_by("created_at", "id")
        return ServiceResult.success({"parent_message": parent, "replies": list(replies)})


class DirectMessageService(BaseService):
    """
    Service for direct messages.

    Methods:
        send_direct_message: Send a message to another user
        list_conversation: Messages between two users, both directions
        mark_as_read: Mark messages from another user as read
        unread_counts: Unread messages per sender for a user
    """

    @classmethod
    def send_direct_message(
        cls,
        sender: User,
        receiver_id: int,
        content: str = "",
        file_name: str = "",
        file_url: str = "",
        file_type: str = "",
        file_size: int | None = None,
    ) -> ServiceResult[SentMessage]:
        """
        Send a direct message.

        Publishes "message" on the pair's dm channel and notifies the receiver.

        Error codes:
            EMPTY_MESSAGE: Neither content nor file
            CONTENT_TOO_LONG: Content exceeds the maximum length
            SELF_MESSAGE: Receiver is the sender
            RECEIVER_NOT_FOUND: No active user with receiver_id
        """
        from chat import tasks
        from chat.serializers import DirectMessageSerializer

        content = content or ""
        file_url = file_url or ""

        error = _validate_body(content, file_url)
        if error is not None:
            return error

        if receiver_id == sender.id:
            return ServiceResult.failure(
                "Cannot send a message to yourself", error_code="SELF_MESSAGE"
            )

        User = get_user_model()
        receiver = User.objects.filter(id=receiver_id, is_active=True).first()
        if receiver is None:
            return ServiceResult.failure(
                "Receiver not found", error_code="RECEIVER_NOT_FOUND"
            )

        with transaction.atomic():
            _lock_sender(sender)

            now = timezone.now()
            duplicate = _find_duplicate(
                DirectMessage.objects.filter(sender=sender, receiver=receiver),
                sender.id,
                content,
                file_url,
                now,
            )
            if duplicate is not None:
                cls.get_logger().info(
                    f"Duplicate direct message from user {sender.id} to {receiver.id}, "
                    f"returning message {duplicate.id}"
                )
                return ServiceResult.success(SentMessage(duplicate, created=False))

            direct_message = DirectMessage.objects.create(
                sender=sender,
                receiver=receiver,
                content=content,
                file_name=file_name or "",
                file_url=file_url,
                file_type=file_type or "",
                file_size=file_size,
            )

        cls.get_logger().debug(
            f"User {sender.id} sent direct message {direct_message.id} to {receiver.id}"
        )

        publish(
            dm_channel(sender.id, receiver.id),
            EVENT_MESSAGE,
            DirectMessageSerializer(direct_message).data,
        )
        tasks.send_direct_message_notification.delay(direct_message.id)

        return ServiceResult.success(SentMessage(direct_message, created=True))

    @classmethod
    def list_conversation(cls, user: User, other_user_id: int) -> QuerySet[DirectMessage]:
        return (
            DirectMessage.objects.filter(
                Q(sender=user, receiver_id=other_user_id)
                | Q(sender_id=other_user_id, receiver=user)
            )
            .select_related("sender", "receiver")
            .order_by("created_at", "id")
        )

    @classmethod
    def mark_as_read(cls, user: User, other_user_id: int) -> ServiceResult[int]:
        """Mark every unread message from other_user to user as read."""
        count = DirectMessage.objects.filter(
            sender_id=other_user_id,
            receiver=user,
            read_at__isnull=True,
        ).update(read_at=timezone.now())

        cls.get_logger().debug(
            f"User {user.id} read {count} direct messages from {other_user_id}"
        )
        return ServiceResult.success(count)

    @classmethod
    def unread_counts(cls, user: User) -> dict[int, int]:
        rows = (
            DirectMessage.objects.filter(receiver=user, read_at__isnull=True)
            .values("sender_id")
            .annotate(count=Count("id"))
        )
        return {row["sender_id"]: row["count"] for row in rows}


class UnreadService(BaseService):
    """Badge counts for the sidebar."""

    @classmethod
    def summary(cls, user: User) -> dict[str, dict]:
        """
        Unread mentions per room and unread direct messages per sender.

        Returns:
            {"rooms": {room_id: n}, "direct": {user_id: n},
             "rooms_display": {room_id: "n"|"9+"}, "direct_display": {...}}
        """
        rooms = MentionService.unread_counts(user)
        direct = DirectMessageService.unread_counts(user)
        cap = UNREAD_CONFIG.BADGE_CAP

        return {
            "rooms": rooms,
            "direct": direct,
            "rooms_display": {key: cap_count(value, cap) for key, value in rooms.items()},
            "direct_display": {key: cap_count(value, cap) for key, value in direct.items()},
        }
