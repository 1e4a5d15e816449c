"""
Celery tasks for chat app.

This module defines async tasks for:
- Mention notifications for room messages
- Direct message notifications

Related files:
    - services.py: MessageService, DirectMessageService (enqueue these tasks)
    - notifications/services.py: NotificationService

Usage:
    from chat.tasks import send_mention_notifications

    send_mention_notifications.delay(message_id)
"""

import logging

from celery import shared_task

from chat.constants import MESSAGE_CONFIG

logger = logging.getLogger(__name__)

CHAT_URL = "/chat"


def build_preview(content: str, file_name: str = "") -> str:
    """Notification body: truncated content, or the attachment name."""
    content = (content or "").strip()
    if not content:
        return f"Sent a file: {file_name}" if file_name else "Sent a file"
    limit = MESSAGE_CONFIG.PREVIEW_LENGTH
    return content[:limit] + ("..." if len(content) > limit else "")


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_mention_notifications(self, message_id: int) -> int:
    """
    Create a "mention" notification for every user mentioned in a message.

    Idempotent: each mention uses its own idempotency key, so a retry does
    not notify twice.

    Args:
        message_id: ID of the room message

    Returns:
        Number of notifications created
    """
    from chat.models import Message
    from notifications.services import NotificationService

    try:
        message = Message.objects.select_related("sender").get(id=message_id)
    except Message.DoesNotExist:
        logger.error(f"Message {message_id} not found for mention notifications")
        return 0

    sender = message.sender
    preview = build_preview(message.content, message.file_name)
    created = 0

    for mention in message.mentions.select_related("mentioned_user"):
        result = NotificationService.create_notification(
            recipient=mention.mentioned_user,
            type_key="mention",
            data={
                "sender_name": sender.username,
                "preview": preview,
                "url": CHAT_URL,
                "senderId": sender.id,
                "roomId": message.room_id,
                "messageId": message.id,
                "mentionId": mention.id,
            },
            actor=sender,
            idempotency_key=f"mention-{mention.id}",
        )
        if result.success:
            created += 1
        elif result.error_code != "DUPLICATE":
            logger.warning(
                f"Mention notification for mention {mention.id} not created: {result.error}"
            )

    logger.info(f"Sent {created} mention notifications for message {message_id}")
    return created


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def send_direct_message_notification(self, direct_message_id: int) -> bool:
    """
    Create a "direct_message" notification for the receiver.

    Returns:
        True if a notification was created or already existed
    """
    from chat.models import DirectMessage
    from notifications.services import NotificationService

    try:
        direct_message = DirectMessage.objects.select_related("sender", "receiver").get(
            id=direct_message_id
        )
    except DirectMessage.DoesNotExist:
        logger.error(f"DirectMessage {direct_message_id} not found for notification")
        return False

    sender = direct_message.sender
    result = NotificationService.create_notification(
        recipient=direct_message.receiver,
        type_key="direct_message",
        data={
            "sender_name": sender.username,
            "preview": build_preview(direct_message.content, direct_message.file_name),
            "url": CHAT_URL,
            "senderId": sender.id,
            "messageId": direct_message.id,
        },
        actor=sender,
        idempotency_key=f"direct-message-{direct_message.id}",
    )

    if not result.success and result.error_code != "DUPLICATE":
        logger.warning(
            f"Direct message notification for {direct_message_id} not created: {result.error}"
        )
        return False

    return True
