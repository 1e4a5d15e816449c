"""
Notification service layer.

Services:
    NotificationService: Notification creation and read status management
    DeviceService: OneSignal device registration

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure()
    - Template rendering raises KeyError on missing placeholders
    - Delivery records track per-channel status; one Celery task per pending delivery

Usage:
    from notifications.services import NotificationService

    result = NotificationService.create_notification(
        recipient=user,
        type_key="mention",
        data={"sender_name": "alice", "url": "/chat/general"},
        actor=alice,
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import transaction

from core.services import BaseService, ServiceResult
from notifications.models import (
    DeliveryChannel,
    DeliveryStatus,
    DevicePlatform,
    Notification,
    NotificationDelivery,
    NotificationType,
    PushDevice,
)

if TYPE_CHECKING:
    from authentication.models import User

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    """
    Service for notification operations.

    Methods:
        create_notification: Create a notification and enqueue its deliveries
        mark_as_read: Mark a single notification as read
        mark_all_as_read: Mark all user's unread notifications as read
        unread_count: Count unread notifications for badge display
    """

    @classmethod
    def create_notification(
        cls,
        recipient: User,
        type_key: str,
        data: dict | None = None,
        title: str | None = None,
        body: str | None = None,
        actor: User | None = None,
        idempotency_key: str | None = None,
    ) -> ServiceResult[Notification]:
        """
        Create a new notification for a user.

        If title/body are not provided, templates from NotificationType are
        rendered using the data dict. Explicit title/body override templates.

        Args:
            recipient: User receiving the notification
            type_key: NotificationType.key to look up
            data: Template context, also stored as the notification payload
            title: Explicit title (overrides template)
            body: Explicit body (overrides template)
            actor: User who triggered the notification (optional)
            idempotency_key: Optional key to prevent duplicate notifications

        Returns:
            ServiceResult with created Notification if successful

        Error codes:
            TYPE_NOT_FOUND: Notification type key doesn't exist
            TYPE_INACTIVE: Notification type is deactivated
            DUPLICATE: Notification with this idempotency_key already exists

        Raises:
            KeyError: If template placeholder is missing from data
        """
        from notifications import tasks

        data = data or {}

        try:
            notification_type = NotificationType.objects.get(key=type_key)
        except NotificationType.DoesNotExist:
            cls.get_logger().warning(f"Notification type not found: {type_key}")
            return ServiceResult.failure(
                f"Notification type not found: {type_key}",
                error_code="TYPE_NOT_FOUND",
            )

        if not notification_type.is_active:
            cls.get_logger().info(
                f"Notification type inactive: {type_key} - skipping creation"
            )
            return ServiceResult.failure(
                f"Notification type is inactive: {type_key}",
                error_code="TYPE_INACTIVE",
            )

        if idempotency_key and Notification.objects.filter(
            idempotency_key=idempotency_key
        ).exists():
            cls.get_logger().info(
                f"Duplicate notification prevented: idempotency_key={idempotency_key}"
            )
            return ServiceResult.failure(
                f"Notification with idempotency_key already exists: {idempotency_key}",
                error_code="DUPLICATE",
            )

        rendered_title = title or notification_type.title_template.format(**data)
        rendered_body = body or notification_type.body_template.format(**data)

        channels = []
        if notification_type.supports_push:
            channels.append(DeliveryChannel.PUSH)
        if notification_type.supports_websocket:
            channels.append(DeliveryChannel.WEBSOCKET)

        with transaction.atomic():
            notification = Notification.objects.create(
                notification_type=notification_type,
                recipient=recipient,
                actor=actor,
                title=rendered_title,
                body=rendered_body,
                data=data,
                idempotency_key=idempotency_key,
            )
            deliveries = NotificationDelivery.objects.bulk_create(
                [
                    NotificationDelivery(
                        notification=notification,
                        channel=channel,
                        status=DeliveryStatus.PENDING,
                    )
                    for channel in channels
                ]
            )

        cls.get_logger().info(
            f"Created notification {notification.id} of type {type_key} "
            f"for user {recipient.id} with {len(deliveries)} delivery records"
        )

        for delivery in deliveries:
            if delivery.channel == DeliveryChannel.PUSH:
                tasks.send_push_notification.delay(delivery.id)
            elif delivery.channel == DeliveryChannel.WEBSOCKET:
                tasks.broadcast_websocket_notification.delay(delivery.id)

        return ServiceResult.success(notification)

    @classmethod
    def mark_as_read(
        cls,
        notification: Notification,
        user: User,
    ) -> ServiceResult[Notification]:
        """
        Mark a single notification as read.

        Idempotent - marking an already-read notification succeeds.

        Error codes:
            NOT_OWNER: User doesn't own the notification
        """
        if notification.recipient_id != user.id:
            cls.get_logger().warning(
                f"User {user.id} attempted to mark notification {notification.id} "
                f"owned by user {notification.recipient_id}"
            )
            return ServiceResult.failure(
                "Cannot mark notification you don't own",
                error_code="NOT_OWNER",
            )

        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=["is_read", "updated_at"])
            cls.get_logger().debug(f"Marked notification {notification.id} as read")

        return ServiceResult.success(notification)

    @classmethod
    def mark_all_as_read(cls, user: User) -> ServiceResult[int]:
        """Mark all user's unread notifications as read; returns the count."""
        count = Notification.objects.filter(
            recipient=user,
            is_read=False,
        ).update(is_read=True)

        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")

        return ServiceResult.success(count)

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.filter(recipient=user, is_read=False).count()


class DeviceService(BaseService):
    """OneSignal subscription management."""

    @classmethod
    def register_device(
        cls,
        user: User,
        player_id: str,
        platform: str = DevicePlatform.WEB,
    ) -> ServiceResult[PushDevice]:
        """
        Register (or re-register) a player id for a user.

        A player id is unique across users: registering one that belongs to
        another account moves it to the caller, since the browser or app is
        now signed in as them. Re-registration revalidates the device.

        Error codes:
            INVALID_PLATFORM: platform is not web, ios or android
        """
        if platform not in DevicePlatform.values:
            return ServiceResult.failure(
                f"Invalid platform: {platform}",
                error_code="INVALID_PLATFORM",
            )

        device, created = PushDevice.objects.update_or_create(
            player_id=player_id,
            defaults={
                "user": user,
                "platform": platform,
                "is_valid": True,
                "last_failure_at": None,
            },
        )

        action = "registered" if created else "refreshed"
        cls.get_logger().info(f"Push device {action} for user {user.id}: {platform}")

        return ServiceResult.success(device)

    @classmethod
    def unregister_device(cls, user: User, player_id: str) -> ServiceResult[None]:
        """
        Remove one of the caller's devices.

        Error codes:
            DEVICE_NOT_FOUND: No such player id for this user
        """
        deleted, _ = PushDevice.objects.filter(user=user, player_id=player_id).delete()
        if not deleted:
            return ServiceResult.failure(
                "Device not found",
                error_code="DEVICE_NOT_FOUND",
            )

        cls.get_logger().info(f"Push device unregistered for user {user.id}")
        return ServiceResult.success(None)

    @classmethod
    def valid_player_ids(cls, user_id: int) -> list[str]:
        return list(
            PushDevice.objects.filter(user_id=user_id, is_valid=True).values_list(
                "player_id", flat=True
            )
        )
