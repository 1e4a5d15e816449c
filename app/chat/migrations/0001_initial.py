# Generated manually - initial chat schema

import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models


def timestamp_fields():
    return [
        (
            "created_at",
            models.DateTimeField(
                auto_now_add=True,
                db_index=True,
                help_text="Timestamp when this record was created",
            ),
        ),
        (
            "updated_at",
            models.DateTimeField(
                auto_now=True,
                help_text="Timestamp when this record was last modified",
            ),
        ),
    ]


def attachment_fields():
    return [
        (
            "file_name",
            models.CharField(
                blank=True,
                default="",
                help_text="Original name of the attached file",
                max_length=255,
            ),
        ),
        (
            "file_url",
            models.URLField(
                blank=True,
                default="",
                help_text="Public URL of the attached file",
                max_length=1024,
            ),
        ),
        (
            "file_type",
            models.CharField(
                blank=True,
                default="",
                help_text="MIME type of the attached file",
                max_length=127,
            ),
        ),
        (
            "file_size",
            models.PositiveBigIntegerField(
                blank=True,
                help_text="Size of the attached file in bytes",
                null=True,
            ),
        ),
    ]


def id_field():
    return (
        "id",
        models.BigAutoField(
            auto_created=True,
            primary_key=True,
            serialize=False,
            verbose_name="ID",
        ),
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                id_field(),
                *timestamp_fields(),
                (
                    "name",
                    models.CharField(
                        help_text="Room name (unique, case-insensitive)",
                        max_length=100,
                    ),
                ),
                (
                    "description",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Short description shown in the room list",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who created this room (null for system-created)",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_rooms",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_room",
                "ordering": ["name"],
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower("name"),
                        name="chat_room_name_ci_unique",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                id_field(),
                *attachment_fields(),
                *timestamp_fields(),
                (
                    "content",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Message text (may be empty when a file is attached)",
                    ),
                ),
                (
                    "reply_count",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Number of replies to this message (cached for performance)",
                    ),
                ),
                (
                    "last_reply_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="Timestamp of the most recent reply",
                        null=True,
                    ),
                ),
                (
                    "parent_message",
                    models.ForeignKey(
                        blank=True,
                        help_text="Root message of the thread (null if top-level)",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="replies",
                        to="chat.message",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        help_text="Room this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.room",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="room_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["room", "created_at", "id"],
                        name="chat_msg_room_created_idx",
                    ),
                    models.Index(
                        condition=models.Q(parent_message__isnull=False),
                        fields=["parent_message", "created_at"],
                        name="chat_msg_parent_idx",
                    ),
                    models.Index(
                        fields=["sender", "-created_at"],
                        name="chat_msg_sender_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DirectMessage",
            fields=[
                id_field(),
                *attachment_fields(),
                *timestamp_fields(),
                (
                    "content",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Message text (may be empty when a file is attached)",
                    ),
                ),
                (
                    "read_at",
                    models.DateTimeField(
                        blank=True,
                        db_index=True,
                        help_text="When the receiver read this message (null if unread)",
                        null=True,
                    ),
                ),
                (
                    "receiver",
                    models.ForeignKey(
                        help_text="User who receives this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="received_direct_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        help_text="User who sent this message",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_direct_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_direct_message",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["sender", "receiver", "created_at"],
                        name="chat_dm_pair_created_idx",
                    ),
                    models.Index(
                        condition=models.Q(read_at__isnull=True),
                        fields=["receiver", "sender"],
                        name="chat_dm_unread_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MessageMention",
            fields=[
                id_field(),
                *timestamp_fields(),
                (
                    "read_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the mentioned user saw the mention (null if unread)",
                        null=True,
                    ),
                ),
                (
                    "mentioned_user",
                    models.ForeignKey(
                        help_text="User who was mentioned",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="message_mentions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "message",
                    models.ForeignKey(
                        help_text="Message containing the mention",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="mentions",
                        to="chat.message",
                    ),
                ),
            ],
            options={
                "db_table": "chat_message_mention",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["mentioned_user", "read_at"],
                        name="chat_mention_user_read_idx",
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("message", "mentioned_user"),
                        name="unique_message_mention",
                    )
                ],
            },
        ),
    ]
