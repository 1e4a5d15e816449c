"""
Tests for ChatConsumer and JWTAuthMiddleware.

Uses channels' WebsocketCommunicator against the same middleware stack as
config/asgi.py (minus the origin validator) and the in-memory channel layer.
"""

import pytest
from channels.db import database_sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from rest_framework_simplejwt.tokens import AccessToken

from authentication.tests.factories import UserFactory
from chat.middleware import JWTAuthMiddleware
from chat.realtime import build_group_message, dm_channel
from chat.routing import websocket_urlpatterns
from chat.tests.factories import MessageFactory, RoomFactory

WS_PATH = "/ws/chat/"

application = JWTAuthMiddleware(URLRouter(websocket_urlpatterns))

pytestmark = [pytest.mark.asyncio, pytest.mark.django_db(transaction=True)]


@database_sync_to_async
def create_user(**kwargs):
    return UserFactory(**kwargs)


@database_sync_to_async
def create_room(**kwargs):
    return RoomFactory(**kwargs)


@database_sync_to_async
def create_message(**kwargs):
    return MessageFactory(**kwargs)


def access_token(user) -> str:
    return str(AccessToken.for_user(user))


async def connect(user):
    communicator = WebsocketCommunicator(application, f"{WS_PATH}?token={access_token(user)}")
    connected, _ = await communicator.connect()
    assert connected
    return communicator


async def subscribe(communicator, channel):
    await communicator.send_json_to({"type": "subscribe", "channel": channel})
    return await communicator.receive_json_from()


class TestConnect:
    async def test_anonymous_connection_closed(self):
        communicator = WebsocketCommunicator(application, WS_PATH)

        connected, code = await communicator.connect()

        assert not connected
        assert code == 4001

    async def test_invalid_token_closed(self):
        communicator = WebsocketCommunicator(application, f"{WS_PATH}?token=not-a-jwt")

        connected, code = await communicator.connect()

        assert not connected
        assert code == 4001

    async def test_inactive_user_closed(self):
        user = await create_user(is_active=False)
        communicator = WebsocketCommunicator(
            application, f"{WS_PATH}?token={access_token(user)}"
        )

        connected, code = await communicator.connect()

        assert not connected
        assert code == 4001

    async def test_query_string_token(self):
        user = await create_user()

        communicator = await connect(user)

        await communicator.disconnect()

    async def test_subprotocol_token_is_echoed(self):
        user = await create_user()
        communicator = WebsocketCommunicator(
            application, WS_PATH, subprotocols=["jwt", access_token(user)]
        )

        connected, subprotocol = await communicator.connect()

        assert connected
        assert subprotocol == "jwt"
        await communicator.disconnect()


class TestSubscriptions:
    async def test_subscribe_to_room(self):
        user = await create_user()
        room = await create_room()
        communicator = await connect(user)

        response = await subscribe(communicator, f"chat-{room.id}")

        assert response == {"type": "subscribed", "channel": f"chat-{room.id}"}
        await communicator.disconnect()

    async def test_subscribe_to_missing_room(self):
        user = await create_user()
        communicator = await connect(user)

        response = await subscribe(communicator, "chat-999999")

        assert response["type"] == "error"
        assert response["code"] == 4003
        assert response["channel"] == "chat-999999"
        await communicator.disconnect()

    async def test_subscribe_to_thread(self):
        user = await create_user()
        message = await create_message()
        communicator = await connect(user)

        response = await subscribe(communicator, f"thread-{message.id}")

        assert response["type"] == "subscribed"
        await communicator.disconnect()

    async def test_subscribe_to_own_dm(self):
        user = await create_user()
        other = await create_user()
        communicator = await connect(user)

        response = await subscribe(communicator, dm_channel(user.id, other.id))

        assert response["type"] == "subscribed"
        await communicator.disconnect()

    async def test_subscribe_to_someone_elses_dm(self):
        user = await create_user()
        a = await create_user()
        b = await create_user()
        communicator = await connect(user)

        response = await subscribe(communicator, dm_channel(a.id, b.id))

        assert response["code"] == 4003
        await communicator.disconnect()

    async def test_subscribe_without_channel(self):
        user = await create_user()
        communicator = await connect(user)

        await communicator.send_json_to({"type": "subscribe"})
        response = await communicator.receive_json_from()

        assert response["code"] == 4000
        await communicator.disconnect()

    @pytest.mark.parametrize("frame_type", ["subscribe", "unsubscribe", "typing"])
    @pytest.mark.parametrize("channel", [["chat-1"], {"name": "chat-1"}, 42, ""])
    async def test_non_string_channel_rejected(self, frame_type, channel):
        user = await create_user()
        communicator = await connect(user)

        await communicator.send_json_to({"type": frame_type, "channel": channel})
        response = await communicator.receive_json_from()

        assert response == {"type": "error", "code": 4000, "message": "channel is required"}

        # The connection survives the bad frame
        room = await create_room()
        assert (await subscribe(communicator, f"chat-{room.id}"))["type"] == "subscribed"
        await communicator.disconnect()

    async def test_unknown_frame_type(self):
        user = await create_user()
        communicator = await connect(user)

        await communicator.send_json_to({"type": "dance"})
        response = await communicator.receive_json_from()

        assert response == {
            "type": "error",
            "code": 4000,
            "message": "Unknown message type: dance",
        }
        await communicator.disconnect()


class TestEvents:
    async def test_room_event_forwarded(self):
        user = await create_user()
        room = await create_room()
        communicator = await connect(user)
        channel = f"chat-{room.id}"
        await subscribe(communicator, channel)

        await get_channel_layer().group_send(
            channel, build_group_message(channel, "message", {"id": 1, "content": "hi"})
        )

        assert await communicator.receive_json_from() == {
            "type": "event",
            "channel": channel,
            "event": "message",
            "data": {"id": 1, "content": "hi"},
        }
        await communicator.disconnect()

    async def test_private_channel_joined_on_connect(self):
        user = await create_user()
        communicator = await connect(user)
        channel = f"user-{user.id}"

        await get_channel_layer().group_send(
            channel, build_group_message(channel, "notification", {"id": 7})
        )

        response = await communicator.receive_json_from()
        assert response["event"] == "notification"
        assert response["data"] == {"id": 7}
        await communicator.disconnect()

    async def test_unsubscribe_stops_events(self):
        user = await create_user()
        room = await create_room()
        communicator = await connect(user)
        channel = f"chat-{room.id}"
        await subscribe(communicator, channel)

        await communicator.send_json_to({"type": "unsubscribe", "channel": channel})
        assert await communicator.receive_json_from() == {
            "type": "unsubscribed",
            "channel": channel,
        }

        await get_channel_layer().group_send(
            channel, build_group_message(channel, "message", {"id": 1})
        )
        assert await communicator.receive_nothing()
        await communicator.disconnect()

    async def test_private_channel_cannot_be_left(self):
        user = await create_user()
        communicator = await connect(user)
        channel = f"user-{user.id}"

        await communicator.send_json_to({"type": "unsubscribe", "channel": channel})
        await communicator.receive_json_from()

        await get_channel_layer().group_send(
            channel, build_group_message(channel, "notification", {"id": 1})
        )
        response = await communicator.receive_json_from()
        assert response["event"] == "notification"
        await communicator.disconnect()


class TestTyping:
    async def test_typing_reaches_others_but_not_author(self):
        ana = await create_user(username="ana")
        ben = await create_user(username="ben")
        room = await create_room()
        channel = f"chat-{room.id}"
        ana_ws = await connect(ana)
        ben_ws = await connect(ben)
        await subscribe(ana_ws, channel)
        await subscribe(ben_ws, channel)

        await ana_ws.send_json_to({"type": "typing", "channel": channel, "is_typing": True})

        assert await ben_ws.receive_json_from() == {
            "type": "event",
            "channel": channel,
            "event": "typing",
            "data": {"username": "ana", "isTyping": True},
        }
        assert await ana_ws.receive_nothing()
        await ana_ws.disconnect()
        await ben_ws.disconnect()

    async def test_typing_requires_subscription(self):
        user = await create_user()
        room = await create_room()
        communicator = await connect(user)

        await communicator.send_json_to(
            {"type": "typing", "channel": f"chat-{room.id}", "is_typing": True}
        )
        response = await communicator.receive_json_from()

        assert response["code"] == 4003
        await communicator.disconnect()
