"""
Notifications app for in-app, realtime and push delivery.

This app provides:
- NotificationType model seeded with the chat notification templates
- Notification model for storing user notifications
- NotificationService for centralized notification creation
- Celery tasks for async delivery (OneSignal push, WebSocket)
- REST API for the inbox and push device registration

Usage:
    from notifications.services import NotificationService

    result = NotificationService.create_notification(
        recipient=user,
        type_key="direct_message",
        data={"sender_name": sender.username, "url": f"/chat/dm/{sender.id}"},
        actor=sender,
    )
"""
