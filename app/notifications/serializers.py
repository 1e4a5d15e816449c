"""
Serializers for notification API.

Serializers:
    NotificationSerializer: Read-only serializer for notification details
    UnreadCountSerializer: Response for unread count endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint
    PushDeviceSerializer: Register a OneSignal player id
"""

from __future__ import annotations

from rest_framework import serializers

from notifications.models import DevicePlatform, Notification, PushDevice


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    Also used as the payload of the websocket "notification" event.
    actor_name is None for system notifications or when the actor was deleted.
    """

    type_key = serializers.CharField(source="notification_type.key", read_only=True)
    actor_name = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "type_key",
            "title",
            "body",
            "data",
            "actor_name",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields

    def get_actor_name(self, obj: Notification) -> str | None:
        if obj.actor is None:
            return None
        return obj.actor.username


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    marked_count = serializers.IntegerField()


class PushDeviceSerializer(serializers.ModelSerializer):
    """
    Register a OneSignal subscription for the current user.

    player_id uniqueness is handled by DeviceService (re-registration moves
    the device), so the model's unique validator is disabled here.
    """

    player_id = serializers.CharField(max_length=255)
    platform = serializers.ChoiceField(
        choices=DevicePlatform.choices,
        default=DevicePlatform.WEB,
    )

    class Meta:
        model = PushDevice
        fields = ["player_id", "platform", "is_valid", "created_at"]
        read_only_fields = ["is_valid", "created_at"]
