"""
Realtime channel naming and publishing.

Channel names double as Channels group names:

    chat-{room_id}      room messages and thread updates
    dm-{lo}-{hi}        direct messages between two users (ids sorted)
    thread-{parent_id}  replies to one message
    user-{user_id}      private; notifications

Everything is published as a "chat.event" group message, which
ChatConsumer.chat_event forwards to clients as
{"type": "event", "channel", "event", "data"}.

Usage:
    from chat.realtime import EVENT_MESSAGE, publish, room_channel

    publish(room_channel(room.id), EVENT_MESSAGE, MessageSerializer(message).data)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

EVENT_MESSAGE = "message"
EVENT_REPLY = "reply"
EVENT_THREAD_UPDATE = "thread-update"
EVENT_TYPING = "typing"
EVENT_NOTIFICATION = "notification"

GROUP_MESSAGE_TYPE = "chat.event"

CHANNEL_PATTERN = re.compile(r"^(chat|thread|user)-(\d+)$|^dm-(\d+)-(\d+)$")


@dataclass(frozen=True)
class ChannelRef:
    """A parsed channel name."""

    kind: str  # "chat", "dm", "thread" or "user"
    ids: tuple[int, ...]

    @property
    def name(self) -> str:
        return f"{self.kind}-" + "-".join(str(i) for i in self.ids)


def room_channel(room_id: int) -> str:
    return f"chat-{room_id}"


def dm_channel(user_a_id: int, user_b_id: int) -> str:
    lo, hi = sorted((int(user_a_id), int(user_b_id)))
    return f"dm-{lo}-{hi}"


def thread_channel(parent_id: int) -> str:
    return f"thread-{parent_id}"


def user_channel(user_id: int) -> str:
    return f"user-{user_id}"


def parse_channel(name: str) -> ChannelRef | None:
    """Parse a channel name; None if it is not one of the known forms."""
    match = CHANNEL_PATTERN.match(name or "")
    if not match:
        return None
    if match.group(1):
        return ChannelRef(kind=match.group(1), ids=(int(match.group(2)),))
    return ChannelRef(kind="dm", ids=(int(match.group(3)), int(match.group(4))))


def build_group_message(
    channel: str,
    event: str,
    data: dict[str, Any],
    sender_id: int | None = None,
) -> dict[str, Any]:
    return {
        "type": GROUP_MESSAGE_TYPE,
        "channel": channel,
        "event": event,
        "data": data,
        "sender_id": sender_id,
    }


def publish(
    channel: str,
    event: str,
    data: dict[str, Any],
    sender_id: int | None = None,
) -> bool:
    """
    Publish an event to everyone subscribed to channel.

    Safe to call from synchronous code (views, services, Celery tasks).

    Returns:
        False if no channel layer is configured, True otherwise
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning(f"No channel layer configured, {event} on {channel} dropped")
        return False

    async_to_sync(channel_layer.group_send)(
        channel,
        build_group_message(channel, event, dict(data), sender_id),
    )
    logger.debug(f"Published {event} on {channel}")
    return True
