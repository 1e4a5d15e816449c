"""
Chat application configuration.

This app provides the team chat with:
- Public rooms and single-level threads
- Direct messages between two users
- @mentions with unread badges
- Realtime events over Django Channels
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
