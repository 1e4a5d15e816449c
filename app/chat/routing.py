"""
WebSocket URL routing for the chat application.

URL Patterns:
    ws/chat/ - Single multiplexed connection; channels are joined with
               subscribe frames (see consumers.ChatConsumer)

Authentication:
    JWT token is passed as query parameter (?token=<jwt_access_token>) or as
    the "jwt" subprotocol. JWTAuthMiddleware attaches the user to the scope.
"""

from django.urls import path

from chat import consumers

websocket_urlpatterns = [
    path("ws/chat/", consumers.ChatConsumer.as_asgi()),
]
