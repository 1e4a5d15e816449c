"""
WebSocket consumers for the chat application.

ChatConsumer is a single multiplexed connection per client. The client
subscribes to the channels it is looking at (a room, a thread, a DM
conversation) and is always joined to its private user channel.

Authentication:
    JWTAuthMiddleware attaches the user to self.scope["user"].
    Anonymous connections are closed with 4001.

Message Types (from client):
    - subscribe:   {"type": "subscribe", "channel": "chat-1"}
    - unsubscribe: {"type": "unsubscribe", "channel": "chat-1"}
    - typing:      {"type": "typing", "channel": "chat-1", "is_typing": true}

Message Types (to client):
    - subscribed / unsubscribed: {"type": ..., "channel": ...}
    - event: {"type": "event", "channel", "event", "data"}
    - error: {"type": "error", "code": 4003, "message", "channel"?}

Messages themselves are sent over REST; the server publishes them here
(see chat.realtime).
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from chat.authorization import ChatAuthorizationService
from chat.constants import REALTIME_CONFIG
from chat.realtime import EVENT_TYPING, build_group_message, user_channel

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for realtime chat events.

    Attributes:
        user: Authenticated user (after connect)
        subscriptions: Channel names this connection has joined
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.subscriptions: set[str] = set()

    async def connect(self):
        user = self.scope.get("user")

        if not user or isinstance(user, AnonymousUser) or not user.is_authenticated:
            logger.warning("Rejected unauthenticated websocket connection")
            await self.close(code=REALTIME_CONFIG.CLOSE_UNAUTHENTICATED)
            return

        self.user = user

        private_channel = user_channel(user.id)
        await self.channel_layer.group_add(private_channel, self.channel_name)
        self.subscriptions.add(private_channel)

        # Browsers require the server to echo the subprotocol the token came in
        subprotocols = self.scope.get("subprotocols") or []
        if REALTIME_CONFIG.JWT_SUBPROTOCOL in subprotocols:
            await self.accept(subprotocol=REALTIME_CONFIG.JWT_SUBPROTOCOL)
        else:
            await self.accept()

        logger.info(f"User {user.id} connected to realtime")

    async def disconnect(self, close_code):
        for channel in self.subscriptions:
            await self.channel_layer.group_discard(channel, self.channel_name)
        self.subscriptions.clear()

        if self.user is not None:
            logger.info(f"User {self.user.id} disconnected from realtime ({close_code})")

    async def receive_json(self, content, **kwargs):
        """
        Dispatch a client frame.

        Args:
            content: Parsed JSON frame from client
        """
        if not isinstance(content, dict):
            await self._send_error(REALTIME_CONFIG.ERROR_BAD_REQUEST, "Invalid frame")
            return

        message_type = content.get("type")
        channel = content.get("channel")

        if message_type not in ("subscribe", "unsubscribe", "typing"):
            await self._send_error(
                REALTIME_CONFIG.ERROR_BAD_REQUEST,
                f"Unknown message type: {message_type}",
            )
            return

        if not isinstance(channel, str) or not channel:
            await self._send_error(REALTIME_CONFIG.ERROR_BAD_REQUEST, "channel is required")
            return

        if message_type == "subscribe":
            await self._handle_subscribe(channel)
        elif message_type == "unsubscribe":
            await self._handle_unsubscribe(channel)
        else:
            await self._handle_typing(channel, bool(content.get("is_typing", False)))

    async def _handle_subscribe(self, channel: str):
        allowed, reason = await self._can_subscribe(channel)
        if not allowed:
            logger.warning(f"User {self.user.id} refused subscription to {channel}: {reason}")
            await self._send_error(REALTIME_CONFIG.ERROR_FORBIDDEN, reason, channel)
            return

        if channel not in self.subscriptions:
            await self.channel_layer.group_add(channel, self.channel_name)
            self.subscriptions.add(channel)

        await self.send_json({"type": "subscribed", "channel": channel})

    async def _handle_unsubscribe(self, channel):
        # The private channel stays joined for the lifetime of the connection
        if channel in self.subscriptions and channel != user_channel(self.user.id):
            await self.channel_layer.group_discard(channel, self.channel_name)
            self.subscriptions.discard(channel)

        await self.send_json({"type": "unsubscribed", "channel": channel})

    async def _handle_typing(self, channel, is_typing: bool):
        """Broadcast a typing indicator to a subscribed channel; never persisted."""
        if channel not in self.subscriptions:
            await self._send_error(
                REALTIME_CONFIG.ERROR_FORBIDDEN,
                "Subscribe to the channel before sending typing events",
                channel,
            )
            return

        await self.channel_layer.group_send(
            channel,
            build_group_message(
                channel,
                EVENT_TYPING,
                {"username": self.user.username, "isTyping": is_typing},
                sender_id=self.user.id,
            ),
        )

    async def chat_event(self, event):
        """
        Handle chat.event messages from the channel layer.

        Typing indicators are not echoed back to their author.
        """
        if event["event"] == EVENT_TYPING and event.get("sender_id") == self.user.id:
            return

        await self.send_json(
            {
                "type": "event",
                "channel": event["channel"],
                "event": event["event"],
                "data": event["data"],
            }
        )

    async def _send_error(self, code: int, message: str, channel: str | None = None):
        payload = {"type": "error", "code": code, "message": message}
        if channel is not None:
            payload["channel"] = channel
        await self.send_json(payload)

    @database_sync_to_async
    def _can_subscribe(self, channel: str) -> tuple[bool, str]:
        return ChatAuthorizationService.can_subscribe(self.user, channel)
