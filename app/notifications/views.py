"""
Views for notification API.

ViewSets:
    NotificationViewSet: ReadOnlyModelViewSet with custom actions for read status
    DeviceViewSet: Register and remove OneSignal devices

Endpoints:
    GET /api/v1/notifications/ - List user's notifications (paginated, ?is_read=)
    GET /api/v1/notifications/{id}/ - Get notification detail
    GET /api/v1/notifications/unread-count/ - Get unread count
    POST /api/v1/notifications/{id}/read/ - Mark single notification as read
    POST /api/v1/notifications/read-all/ - Mark all notifications as read
    POST /api/v1/notifications/devices/ - Register a push device
    DELETE /api/v1/notifications/devices/{player_id}/ - Remove a push device
"""

from __future__ import annotations

from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.views import result_error_response
from notifications.models import Notification
from notifications.serializers import (
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    PushDeviceSerializer,
    UnreadCountSerializer,
)
from notifications.services import DeviceService, NotificationService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description=(
            "Get paginated list of notifications for the authenticated user, "
            "newest first. Supports filtering by read status."
        ),
        parameters=[
            OpenApiParameter(
                name="is_read",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Filter by read status (true/false)",
                required=False,
            ),
        ],
        tags=["Notifications"],
    ),
    retrieve=extend_schema(
        operation_id="get_notification",
        summary="Get notification",
        description="Get details of a specific notification.",
        tags=["Notifications"],
    ),
)
class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Notification inbox for the current user.

    Users can only access their own notifications; other users' ids 404.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        queryset = Notification.objects.filter(
            recipient=self.request.user
        ).select_related("notification_type", "actor")

        is_read = self.request.query_params.get("is_read")
        if is_read is not None:
            queryset = queryset.filter(is_read=is_read.lower() == "true")

        return queryset

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        description="Get the count of unread notifications for badge display.",
        responses={200: UnreadCountSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        count = NotificationService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read. "
            "This operation is idempotent - already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Notification not found"),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = self.get_object()

        result = NotificationService.mark_as_read(notification, request.user)
        if not result.success:
            return result_error_response(result)

        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        description="Mark all unread notifications for the authenticated user as read.",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        result = NotificationService.mark_all_as_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": result.data}).data)


class DeviceViewSet(viewsets.ViewSet):
    """
    OneSignal device registration.

    - create: POST /devices/ - Register (or move) a player id to the caller
    - destroy: DELETE /devices/{player_id}/ - Remove one of the caller's devices
    """

    permission_classes = [IsAuthenticated]
    lookup_field = "player_id"
    lookup_value_regex = r"[^/]+"

    @extend_schema(
        operation_id="register_push_device",
        summary="Register push device",
        description=(
            "Register a OneSignal player id for push notifications. Idempotent; "
            "a player id registered by another account is moved to the caller."
        ),
        request=PushDeviceSerializer,
        responses={
            201: PushDeviceSerializer,
            400: OpenApiResponse(description="Validation error"),
        },
        tags=["Notifications"],
    )
    def create(self, request):
        serializer = PushDeviceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DeviceService.register_device(
            user=request.user,
            player_id=serializer.validated_data["player_id"],
            platform=serializer.validated_data["platform"],
        )
        if not result.success:
            return result_error_response(result)

        return Response(
            PushDeviceSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="unregister_push_device",
        summary="Unregister push device",
        description="Remove one of the caller's OneSignal player ids.",
        responses={
            204: OpenApiResponse(description="Device removed"),
            404: OpenApiResponse(description="Device not found"),
        },
        tags=["Notifications"],
    )
    def destroy(self, request, player_id=None):
        result = DeviceService.unregister_device(request.user, player_id)
        if not result.success:
            return result_error_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)
