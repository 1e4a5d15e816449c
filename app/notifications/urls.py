"""
URL configuration for notifications API.

Routes:
    Notifications:
        /                     - List notifications (GET)
        /{id}/                - Notification detail (GET)
        /unread-count/        - Get unread count (GET)
        /{id}/read/           - Mark single as read (POST)
        /read-all/            - Mark all as read (POST)

    Devices:
        /devices/             - Register OneSignal device (POST)
        /devices/{player_id}/ - Remove device (DELETE)
"""

from rest_framework.routers import SimpleRouter

from notifications.views import DeviceViewSet, NotificationViewSet

router = SimpleRouter()
# devices/ is registered first so it is not captured by the notification detail route
router.register(r"devices", DeviceViewSet, basename="device")
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = router.urls
