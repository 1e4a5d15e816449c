"""
Service-level authorization for realtime channels.

This module decides who may subscribe to which channel. It is distinct from
DRF permission classes, which handle HTTP-level authorization.

Rules:
    chat-{room_id}      room exists
    thread-{parent_id}  parent message exists
    dm-{a}-{b}          caller is a or b
    user-{id}           caller's own id only

Usage:
    allowed, reason = ChatAuthorizationService.can_subscribe(user, "dm-3-7")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chat.realtime import parse_channel

if TYPE_CHECKING:
    from authentication.models import User


class ChatAuthorizationService:
    """
    Stateless service providing authorization checks for chat channels.

    Methods return (allowed, reason) tuples so consumers can report why a
    subscription was refused.
    """

    @classmethod
    def room_exists(cls, room_id: int) -> bool:
        from chat.models import Room

        return Room.objects.filter(id=room_id).exists()

    @classmethod
    def message_exists(cls, message_id: int) -> bool:
        from chat.models import Message

        return Message.objects.filter(id=message_id).exists()

    @classmethod
    def can_subscribe(cls, user: User, channel_name: str) -> tuple[bool, str]:
        """
        Check whether user may subscribe to channel_name.

        Args:
            user: Authenticated user
            channel_name: Channel to join (e.g., "chat-1")

        Returns:
            (True, "") if allowed, otherwise (False, reason)
        """
        channel = parse_channel(channel_name)
        if channel is None:
            return False, "Unknown channel"

        if channel.kind == "chat":
            if cls.room_exists(channel.ids[0]):
                return True, ""
            return False, "Room not found"

        if channel.kind == "thread":
            if cls.message_exists(channel.ids[0]):
                return True, ""
            return False, "Message not found"

        if channel.kind == "dm":
            if user.id in channel.ids:
                return True, ""
            return False, "Not a participant in this conversation"

        if channel.kind == "user":
            if channel.ids[0] == user.id:
                return True, ""
            return False, "Cannot subscribe to another user's channel"

        return False, "Unknown channel"
