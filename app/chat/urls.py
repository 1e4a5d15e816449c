"""
URL configuration for chat API.

URL Structure:
    Rooms:
        /rooms/                        GET, POST
        /rooms/{id}/                   GET
        /rooms/{id}/messages/          GET, POST
        /rooms/{id}/mentions/read/     POST

    Threads:
        /threads/{id}/                 GET

    Direct messages:
        /direct-messages/              GET (?user_id=), POST
        /direct-messages/read/         POST

    Unread:
        /unread/                       GET

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from chat.views import (
    DirectMessageReadView,
    DirectMessageView,
    RoomViewSet,
    ThreadView,
    UnreadView,
)

router = SimpleRouter()
router.register(r"rooms", RoomViewSet, basename="room")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
    path("threads/<int:pk>/", ThreadView.as_view(), name="thread-detail"),
    path("direct-messages/", DirectMessageView.as_view(), name="direct-message-list"),
    path(
        "direct-messages/read/",
        DirectMessageReadView.as_view(),
        name="direct-message-read",
    ),
    path("unread/", UnreadView.as_view(), name="unread"),
]
