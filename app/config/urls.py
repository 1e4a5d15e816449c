"""
Root URL configuration.

URL Structure:
    /                                   - ReDoc API documentation
    /schema/                            - OpenAPI schema (YAML)
    /admin/                             - Django admin interface
    /health/                            - Health check (load balancers, Docker)
    /api/v1/auth/                       - Login, logout, Google, magic links
    /api/v1/users/                      - User directory
    /api/v1/admin/users/                - User administration
    /api/v1/chat/                       - Chat endpoints
        rooms/                          - Room list/create
        rooms/{id}/                     - Room detail
        rooms/{id}/messages/            - Message list/send
        rooms/{id}/mentions/read/       - Clear mention badge
        threads/{id}/                   - Thread (root message + replies)
        direct-messages/                - Conversation list/send
        direct-messages/read/           - Mark conversation read
        unread/                         - Unread badges
    /api/v1/notifications/              - Notification inbox and push devices
    /api/v1/media/                      - Attachment upload/download

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    # Authentication and users (auth/, users/, admin/users/)
    path("", include("authentication.urls")),
    path("chat/", include("chat.urls")),
    path("notifications/", include("notifications.urls")),
    path("media/", include("media.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("admin/", admin.site.urls),
    path("health/", health_check, name="health_check"),
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Team Chat Admin"
admin.site.site_title = "Team Chat"
admin.site.index_title = "Chat administration"
