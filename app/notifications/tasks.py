"""
Celery tasks for notification delivery.

Tasks:
    send_push_notification: Deliver notification via OneSignal push
    broadcast_websocket_notification: Publish notification on the user's private channel
    cleanup_invalid_push_devices: Periodic purge of long-invalid devices

Design:
    - Tasks receive delivery_id instead of notification_id
    - Each task updates the NotificationDelivery status
    - Permanent vs transient errors are classified for retry logic
    - Tasks are idempotent: re-running on non-PENDING delivery is a no-op

Usage:
    from notifications.tasks import send_push_notification

    # Called automatically by NotificationService.create_notification()
    send_push_notification.delay(delivery_id=42)
"""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task
from django.utils import timezone as django_timezone

from notifications.models import (
    DeliveryStatus,
    NotificationDelivery,
    PushDevice,
    SkipReason,
)
from notifications.onesignal import OneSignalClient, OneSignalError

logger = logging.getLogger(__name__)

# Invalid devices are kept this long before deletion
INVALID_DEVICE_RETENTION = timedelta(days=30)


def _get_delivery(delivery_id: int) -> NotificationDelivery | None:
    """
    Fetch delivery with related notification.

    Returns None if delivery not found or not in PENDING status.
    """
    try:
        delivery = NotificationDelivery.objects.select_related(
            "notification",
            "notification__recipient",
            "notification__notification_type",
        ).get(id=delivery_id)
    except NotificationDelivery.DoesNotExist:
        logger.warning(f"Delivery {delivery_id} not found")
        return None

    if delivery.status != DeliveryStatus.PENDING:
        logger.info(f"Delivery {delivery_id} status is {delivery.status}, skipping")
        return None

    return delivery


def _mark_sent(
    delivery: NotificationDelivery,
    provider_message_id: str | None = None,
) -> None:
    delivery.status = DeliveryStatus.SENT
    delivery.sent_at = django_timezone.now()
    delivery.provider_message_id = provider_message_id
    delivery.attempt_count += 1
    delivery.save(
        update_fields=[
            "status",
            "sent_at",
            "provider_message_id",
            "attempt_count",
            "updated_at",
        ]
    )


def _mark_delivered(delivery: NotificationDelivery) -> None:
    now = django_timezone.now()
    delivery.status = DeliveryStatus.DELIVERED
    delivery.sent_at = now
    delivery.delivered_at = now
    delivery.attempt_count += 1
    delivery.save(
        update_fields=[
            "status",
            "sent_at",
            "delivered_at",
            "attempt_count",
            "updated_at",
        ]
    )


def _mark_failed(delivery: NotificationDelivery, error: OneSignalError) -> None:
    delivery.status = DeliveryStatus.FAILED
    delivery.failed_at = django_timezone.now()
    delivery.failure_reason = str(error)
    delivery.failure_code = error.code
    delivery.is_permanent_failure = error.is_permanent
    delivery.attempt_count += 1
    delivery.save(
        update_fields=[
            "status",
            "failed_at",
            "failure_reason",
            "failure_code",
            "is_permanent_failure",
            "attempt_count",
            "updated_at",
        ]
    )


def _mark_skipped(delivery: NotificationDelivery, reason: str) -> None:
    delivery.status = DeliveryStatus.SKIPPED
    delivery.skipped_reason = reason
    delivery.save(update_fields=["status", "skipped_reason", "updated_at"])


def _invalidate_devices(player_ids: list[str]) -> int:
    count = PushDevice.objects.filter(player_id__in=player_ids).update(
        is_valid=False,
        last_failure_at=django_timezone.now(),
    )
    if count:
        logger.info(f"Marked {count} push devices as invalid")
    return count


@shared_task(
    bind=True,
    autoretry_for=(OneSignalError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_push_notification(self, delivery_id: int) -> bool:
    """
    Send notification via OneSignal.

    Flow:
        1. Fetch delivery + notification; no-op if not PENDING
        2. Skip when OneSignal is not configured or the user has no valid devices
        3. Send; invalidate player ids OneSignal rejected
        4. On permanent error (4xx): status=FAILED
        5. On transient error (5xx, timeout): raise for retry

    Returns:
        True if sent or skipped, False on permanent failure
    """
    from notifications.services import DeviceService

    delivery = _get_delivery(delivery_id)
    if delivery is None:
        return True

    notification = delivery.notification
    recipient = notification.recipient

    client = OneSignalClient()
    if not client.is_configured:
        _mark_skipped(delivery, SkipReason.PUSH_NOT_CONFIGURED)
        logger.debug(f"OneSignal not configured, delivery {delivery_id} skipped")
        return True

    player_ids = DeviceService.valid_player_ids(recipient.id)
    if not player_ids:
        _mark_skipped(delivery, SkipReason.NO_DEVICES)
        logger.info(
            f"Push notification skipped for delivery {delivery_id}: "
            f"user {recipient.id} has no devices"
        )
        return True

    logger.info(
        f"Sending push notification for delivery {delivery_id} to user {recipient.id}"
    )

    try:
        response = client.send(
            player_ids,
            heading=notification.title,
            content=notification.body or notification.title,
            data=notification.data,
            url=notification.data.get("url"),
        )
    except OneSignalError as e:
        if e.is_permanent:
            _mark_failed(delivery, e)
            logger.warning(
                f"Push notification permanently failed for delivery {delivery_id}: "
                f"{e.code} - {e}"
            )
            return False

        delivery.attempt_count += 1
        delivery.save(update_fields=["attempt_count", "updated_at"])
        logger.warning(
            f"Push notification transiently failed for delivery {delivery_id}: "
            f"{e.code} - {e}, will retry"
        )
        raise

    if response.invalid_player_ids:
        _invalidate_devices(response.invalid_player_ids)

    _mark_sent(delivery, response.notification_id)
    logger.info(
        f"Push notification sent for delivery {delivery_id}, "
        f"provider_message_id={response.notification_id}"
    )
    return True


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def broadcast_websocket_notification(self, delivery_id: int) -> bool:
    """
    Publish a notification event on the recipient's private channel.

    WebSocket delivery is fire-and-forget through the channel layer, so the
    delivery is marked DELIVERED as soon as the publish succeeds.
    """
    from chat.realtime import EVENT_NOTIFICATION, publish, user_channel
    from notifications.serializers import NotificationSerializer

    delivery = _get_delivery(delivery_id)
    if delivery is None:
        return True

    notification = delivery.notification
    recipient_id = notification.recipient_id

    logger.info(
        f"Broadcasting websocket notification for delivery {delivery_id} "
        f"to user {recipient_id}"
    )

    try:
        publish(
            user_channel(recipient_id),
            EVENT_NOTIFICATION,
            NotificationSerializer(notification).data,
        )
    except Exception as e:
        delivery.attempt_count += 1
        delivery.save(update_fields=["attempt_count", "updated_at"])
        logger.exception(
            f"Unexpected error broadcasting websocket for delivery {delivery_id}: {e}"
        )
        raise

    _mark_delivered(delivery)
    logger.info(f"WebSocket notification broadcast for delivery {delivery_id}")
    return True


@shared_task
def cleanup_invalid_push_devices() -> int:
    """
    Delete devices that have been invalid for longer than the retention period.

    Returns:
        Number of devices deleted
    """
    cutoff = django_timezone.now() - INVALID_DEVICE_RETENTION
    deleted, _ = PushDevice.objects.filter(
        is_valid=False,
        last_failure_at__lt=cutoff,
    ).delete()

    logger.info(f"Cleaned up {deleted} invalid push devices")
    return deleted
