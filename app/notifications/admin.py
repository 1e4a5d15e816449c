"""
Django admin configuration for notification models.
"""

from django.contrib import admin

from notifications.models import (
    Notification,
    NotificationDelivery,
    NotificationType,
    PushDevice,
)


@admin.register(NotificationType)
class NotificationTypeAdmin(admin.ModelAdmin):
    """Management of notification type templates and channel support flags."""

    list_display = [
        "key",
        "display_name",
        "is_active",
        "supports_push",
        "supports_websocket",
    ]
    list_filter = ["is_active", "supports_push", "supports_websocket"]
    search_fields = ["key", "display_name"]
    fieldsets = (
        (None, {"fields": ("key", "display_name", "is_active")}),
        ("Templates", {"fields": ("title_template", "body_template")}),
        ("Channel Support", {"fields": ("supports_push", "supports_websocket")}),
    )


class NotificationDeliveryInline(admin.TabularInline):
    model = NotificationDelivery
    extra = 0
    can_delete = False
    readonly_fields = [
        "channel",
        "status",
        "attempt_count",
        "provider_message_id",
        "failure_code",
        "skipped_reason",
        "sent_at",
        "delivered_at",
        "failed_at",
    ]
    fields = readonly_fields


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Read-only view of notifications for debugging and support."""

    list_display = ["id", "notification_type", "recipient", "title", "is_read", "created_at"]
    list_filter = ["is_read", "notification_type"]
    search_fields = ["title", "recipient__email", "recipient__username"]
    raw_id_fields = ["recipient", "actor"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [NotificationDeliveryInline]


@admin.register(PushDevice)
class PushDeviceAdmin(admin.ModelAdmin):
    list_display = ["player_id", "user", "platform", "is_valid", "last_failure_at"]
    list_filter = ["platform", "is_valid"]
    search_fields = ["player_id", "user__email"]
    raw_id_fields = ["user"]
