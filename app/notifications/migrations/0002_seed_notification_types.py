"""
Seed the notification types raised by the chat app.
"""

from django.db import migrations

NOTIFICATION_TYPES = [
    {
        "key": "mention",
        "display_name": "Mention",
        "title_template": "{sender_name} mentioned you",
        "body_template": "{preview}",
    },
    {
        "key": "direct_message",
        "display_name": "Direct Message",
        "title_template": "New message from {sender_name}",
        "body_template": "{preview}",
    },
]


def seed_notification_types(apps, schema_editor):
    NotificationType = apps.get_model("notifications", "NotificationType")
    for definition in NOTIFICATION_TYPES:
        NotificationType.objects.update_or_create(
            key=definition["key"],
            defaults={
                "display_name": definition["display_name"],
                "title_template": definition["title_template"],
                "body_template": definition["body_template"],
                "supports_push": True,
                "supports_websocket": True,
                "is_active": True,
            },
        )


def remove_notification_types(apps, schema_editor):
    NotificationType = apps.get_model("notifications", "NotificationType")
    NotificationType.objects.filter(
        key__in=[definition["key"] for definition in NOTIFICATION_TYPES]
    ).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("notifications", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed_notification_types, remove_notification_types),
    ]
