"""
Chat app for real-time messaging.

This app handles:
- Rooms, room messages and threads
- Direct messages
- Mentions, unread badges and link previews
- WebSocket realtime events and typing indicators

Related apps:
    - authentication: User model for senders and mentions
    - notifications: Mention and direct message notifications
    - media: Attachment upload (messages store the returned URL)

WebSocket Support:
    Uses Django Channels for real-time communication.
    See consumers.py for WebSocket handlers.
    See realtime.py for channel names and publishing.

Usage:
    from chat.services import MessageService, RoomService

    room = RoomService.get_default_room()
    result = MessageService.send_message(room=room, sender=user, content="Hello!")
"""
