"""
Notification system models.

- NotificationType: Configuration for notification types with templates
- Notification: Individual notifications sent to users
- NotificationDelivery: Per-channel delivery tracking
- PushDevice: OneSignal subscriptions registered by a user's browsers and apps

Design Decisions:
    - NotificationType uses integer PK (internal lookup table, seeded by migration)
    - Actor uses SET_NULL (preserve notification when actor deleted)
    - NotificationType uses PROTECT (prevent deletion with existing notifications)
    - Delivery records track status per channel for retry and analytics

Usage:
    from notifications.models import Notification

    unread = Notification.objects.filter(recipient=user, is_read=False)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


# =============================================================================
# Enums
# =============================================================================


class DeliveryChannel(models.TextChoices):
    """Delivery channels for notifications."""

    PUSH = "push", "Push Notification"
    WEBSOCKET = "websocket", "WebSocket"


class DeliveryStatus(models.TextChoices):
    """
    Status of a notification delivery attempt.

    State Flow:
        PENDING -> SENT (accepted by OneSignal)
        PENDING -> DELIVERED (WebSocket broadcast)
        PENDING -> FAILED (permanent error or retries exhausted)
        SKIPPED (no delivery target)
    """

    PENDING = "pending", "Pending"
    SENT = "sent", "Sent"
    DELIVERED = "delivered", "Delivered"
    FAILED = "failed", "Failed"
    SKIPPED = "skipped", "Skipped"


class SkipReason(models.TextChoices):
    """Standardized reasons for skipped deliveries."""

    PUSH_NOT_CONFIGURED = "push_not_configured", "Push provider not configured"
    NO_DEVICES = "no_devices", "No registered devices"


class DevicePlatform(models.TextChoices):
    """Platform a push subscription was created on."""

    WEB = "web", "Web"
    IOS = "ios", "iOS"
    ANDROID = "android", "Android"


# =============================================================================
# Configuration Models
# =============================================================================


class NotificationType(models.Model):
    """
    Lookup table for notification type definitions.

    Seeded via data migration with the chat types:
        mention         "{sender_name} mentioned you"
        direct_message  "New message from {sender_name}"

    Note:
        - Templates use Python str.format() syntax: {placeholder}
        - Missing placeholders raise KeyError during rendering
    """

    key = models.CharField(
        max_length=100,
        unique=True,
        db_index=True,
        help_text="Unique programmatic identifier (e.g., 'mention')",
    )

    display_name = models.CharField(
        max_length=200,
        help_text="Human-readable name for display",
    )

    title_template = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Python format string template for title (e.g., '{sender_name} mentioned you')",
    )

    body_template = models.TextField(
        blank=True,
        default="",
        help_text="Python format string template for body",
    )

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Whether this notification type is currently enabled",
    )

    supports_push = models.BooleanField(
        default=True,
        help_text="Can be delivered via OneSignal push",
    )

    supports_websocket = models.BooleanField(
        default=True,
        help_text="Can be broadcast via WebSocket",
    )

    class Meta:
        db_table = "notifications_notification_type"
        verbose_name = "notification type"
        verbose_name_plural = "notification types"
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.display_name} ({self.key})"


class Notification(BaseModel):
    """
    Individual notification record for a user.

    Title and body are fully rendered strings. data carries the client
    context: url to open, senderId, and mentionId or messageId.
    """

    notification_type = models.ForeignKey(
        NotificationType,
        on_delete=models.PROTECT,
        related_name="notifications",
        help_text="Type of this notification",
    )

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        db_index=True,
        help_text="User receiving this notification",
    )

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="triggered_notifications",
        help_text="User who triggered this notification (optional)",
    )

    title = models.CharField(
        max_length=500,
        help_text="Fully rendered notification title",
    )

    body = models.TextField(
        blank=True,
        default="",
        help_text="Fully rendered notification body",
    )

    data = models.JSONField(
        default=dict,
        blank=True,
        help_text="Client context (url, senderId, mentionId, messageId)",
    )

    is_read = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether recipient has read this notification",
    )

    idempotency_key = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Idempotency key to prevent duplicate notifications",
    )

    class Meta:
        db_table = "notifications_notification"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["recipient", "is_read", "-created_at"],
                name="notif_recipient_unread_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["idempotency_key"],
                name="notif_idempotency_key_unique",
                condition=models.Q(idempotency_key__isnull=False),
            ),
        ]

    def __str__(self) -> str:
        read_status = "read" if self.is_read else "unread"
        return (
            f"Notification({self.notification_type.key}) -> "
            f"User {self.recipient_id} [{read_status}]"
        )


# =============================================================================
# Delivery Tracking Models
# =============================================================================


class NotificationDelivery(BaseModel):
    """
    Tracks delivery status for each channel of a notification.

    One NotificationDelivery record per (notification, channel) combination.
    Tasks receive the delivery id and are no-ops once the status has left PENDING.
    """

    notification = models.ForeignKey(
        Notification,
        on_delete=models.CASCADE,
        related_name="deliveries",
    )

    channel = models.CharField(
        max_length=20,
        choices=DeliveryChannel.choices,
        help_text="Delivery channel",
    )

    status = models.CharField(
        max_length=20,
        choices=DeliveryStatus.choices,
        default=DeliveryStatus.PENDING,
        db_index=True,
        help_text="Current delivery status",
    )

    sent_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the notification was handed to the provider",
    )

    delivered_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When delivery was confirmed",
    )

    failed_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When delivery failed",
    )

    provider_message_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Notification id returned by OneSignal",
    )

    failure_reason = models.TextField(
        blank=True,
        default="",
        help_text="Detailed failure message",
    )

    failure_code = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Error code from provider",
    )

    is_permanent_failure = models.BooleanField(
        default=False,
        help_text="True if retry won't help (e.g., rejected payload)",
    )

    attempt_count = models.PositiveSmallIntegerField(
        default=0,
        help_text="Number of delivery attempts",
    )

    skipped_reason = models.CharField(
        max_length=30,
        choices=SkipReason.choices,
        blank=True,
        default="",
        help_text="Reason if status=SKIPPED",
    )

    class Meta:
        db_table = "notifications_notification_delivery"
        verbose_name = "notification delivery"
        verbose_name_plural = "notification deliveries"
        constraints = [
            models.UniqueConstraint(
                fields=["notification", "channel"],
                name="unique_notification_channel",
            ),
        ]
        indexes = [
            models.Index(
                fields=["status", "channel", "-created_at"],
                name="notif_delivery_status_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Delivery({self.notification_id}, {self.channel}, {self.status})"


class PushDevice(BaseModel):
    """
    A OneSignal subscription (player id) belonging to a user.

    Devices reported invalid by OneSignal are kept with is_valid=False and
    removed later by cleanup_invalid_push_devices.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="push_devices",
        help_text="Owner of this subscription",
    )

    player_id = models.CharField(
        max_length=255,
        unique=True,
        help_text="OneSignal player / subscription id",
    )

    platform = models.CharField(
        max_length=20,
        choices=DevicePlatform.choices,
        default=DevicePlatform.WEB,
        help_text="Platform the subscription was created on",
    )

    is_valid = models.BooleanField(
        default=True,
        help_text="False once OneSignal reports the player id as invalid",
    )

    last_failure_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When OneSignal last rejected this player id",
    )

    class Meta:
        db_table = "notifications_push_device"
        verbose_name = "push device"
        verbose_name_plural = "push devices"
        indexes = [
            models.Index(
                fields=["user", "is_valid"],
                name="notif_push_device_user_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"PushDevice({self.player_id}, user={self.user_id}, {self.platform})"
