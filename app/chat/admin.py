"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Room management
- Message moderation
- Direct message viewing
"""

from django.contrib import admin

from chat.models import DirectMessage, Message, MessageMention, Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "created_by", "created_at"]
    search_fields = ["name", "description"]
    raw_id_fields = ["created_by"]
    readonly_fields = ["created_at", "updated_at"]


class MessageMentionInline(admin.TabularInline):
    model = MessageMention
    extra = 0
    raw_id_fields = ["mentioned_user"]
    readonly_fields = ["read_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for room messages."""

    list_display = [
        "id",
        "room",
        "sender",
        "content_preview",
        "parent_message",
        "reply_count",
        "created_at",
    ]
    list_filter = ["room"]
    search_fields = ["content", "file_name", "sender__username"]
    raw_id_fields = ["room", "sender", "parent_message"]
    readonly_fields = ["reply_count", "last_reply_at", "created_at", "updated_at"]
    inlines = [MessageMentionInline]

    @admin.display(description="Content")
    def content_preview(self, obj):
        if len(obj.content) > 50:
            return obj.content[:50] + "..."
        return obj.content or obj.file_name


@admin.register(DirectMessage)
class DirectMessageAdmin(admin.ModelAdmin):
    list_display = ["id", "sender", "receiver", "read_at", "created_at"]
    search_fields = ["content", "sender__username", "receiver__username"]
    raw_id_fields = ["sender", "receiver"]
    readonly_fields = ["read_at", "created_at", "updated_at"]
