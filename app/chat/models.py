"""
Chat system models.

This module defines the data models for the team chat:
- Room: Public channel every user can read and post in
- Message: Room message, optionally a reply in a thread
- DirectMessage: Private message between two users
- MessageMention: A user @mentioned in a room message

Design Decisions:
    - Rooms are open to all authenticated users (no membership table)
    - Room names are unique case-insensitively
    - Messages support single-level threading (replies to replies reference root)
    - reply_count / last_reply_at are cached on the root message
    - Attachments are stored in object storage; messages keep the URL and metadata
    - Unread state is tracked per mention and per direct message (read_at)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower

from core.models import BaseModel


class AttachmentFields(models.Model):
    """
    File attachment metadata shared by room and direct messages.

    A message carries text, a file, or both. file_url empty means no file.
    """

    file_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Original name of the attached file",
    )

    file_url = models.URLField(
        max_length=1024,
        blank=True,
        default="",
        help_text="Public URL of the attached file",
    )

    file_type = models.CharField(
        max_length=127,
        blank=True,
        default="",
        help_text="MIME type of the attached file",
    )

    file_size = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Size of the attached file in bytes",
    )

    class Meta:
        abstract = True

    @property
    def has_file(self) -> bool:
        return bool(self.file_url)


class Room(BaseModel):
    """
    A public chat room.

    The room named "general" is the default room; it is seeded by migration
    and recreated on demand by RoomService.get_default_room.
    """

    name = models.CharField(
        max_length=100,
        help_text="Room name (unique, case-insensitive)",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Short description shown in the room list",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_rooms",
        help_text="User who created this room (null for system-created)",
    )

    class Meta:
        db_table = "chat_room"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                name="chat_room_name_ci_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"#{self.name}"


class Message(AttachmentFields, BaseModel):
    """
    A message within a room.

    Threading:
        Single-level threading is supported via parent_message.
        If a user replies to a reply, the service layer automatically
        normalizes it to reference the root message instead.

        Example:
            Root message (id=1, parent_message=NULL)
            ├── Reply (id=2, parent_message=1)
            └── Reply to reply (id=3, parent_message=1, NOT 2)

    created_at is the message timestamp.
    """

    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Room this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="room_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message text (may be empty when a file is attached)",
    )

    parent_message = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="replies",
        help_text="Root message of the thread (null if top-level)",
    )

    reply_count = models.PositiveIntegerField(
        default=0,
        help_text="Number of replies to this message (cached for performance)",
    )

    last_reply_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the most recent reply",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            # Top-level messages in a room
            models.Index(
                fields=["room", "created_at", "id"],
                name="chat_msg_room_created_idx",
            ),
            # Replies to a message
            models.Index(
                fields=["parent_message", "created_at"],
                name="chat_msg_parent_idx",
                condition=Q(parent_message__isnull=False),
            ),
            # Duplicate lookups
            models.Index(
                fields=["sender", "-created_at"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        return f"User {self.sender_id} in room {self.room_id}: {content_preview}"

    @property
    def is_reply(self) -> bool:
        return self.parent_message_id is not None


class DirectMessage(AttachmentFields, BaseModel):
    """A private message from sender to receiver."""

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_direct_messages",
        help_text="User who sent this message",
    )

    receiver = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_direct_messages",
        help_text="User who receives this message",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message text (may be empty when a file is attached)",
    )

    read_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the receiver read this message (null if unread)",
    )

    class Meta:
        db_table = "chat_direct_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["sender", "receiver", "created_at"],
                name="chat_dm_pair_created_idx",
            ),
            # Unread counts per sender
            models.Index(
                fields=["receiver", "sender"],
                name="chat_dm_unread_idx",
                condition=Q(read_at__isnull=True),
            ),
        ]

    def __str__(self) -> str:
        return f"DM {self.sender_id} -> {self.receiver_id}"

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


class MessageMention(BaseModel):
    """A user @mentioned in a room message; read_at clears the room badge."""

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="mentions",
        help_text="Message containing the mention",
    )

    mentioned_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="message_mentions",
        help_text="User who was mentioned",
    )

    read_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the mentioned user saw the mention (null if unread)",
    )

    class Meta:
        db_table = "chat_message_mention"
        constraints = [
            models.UniqueConstraint(
                fields=["message", "mentioned_user"],
                name="unique_message_mention",
            ),
        ]
        indexes = [
            models.Index(
                fields=["mentioned_user", "read_at"],
                name="chat_mention_user_read_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Mention of {self.mentioned_user_id} in message {self.message_id}"
