"""
Seed the default "general" room.
"""

from django.db import migrations

DEFAULT_ROOM_NAME = "general"


def create_default_room(apps, schema_editor):
    Room = apps.get_model("chat", "Room")
    if not Room.objects.filter(name__iexact=DEFAULT_ROOM_NAME).exists():
        Room.objects.create(
            name=DEFAULT_ROOM_NAME,
            description="Default room for everyone",
        )


def remove_default_room(apps, schema_editor):
    Room = apps.get_model("chat", "Room")
    Room.objects.filter(name=DEFAULT_ROOM_NAME, created_by__isnull=True).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("chat", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_default_room, remove_default_room),
    ]
