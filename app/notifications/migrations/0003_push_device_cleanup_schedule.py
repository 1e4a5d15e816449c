"""
Add the Celery Beat schedule for invalid push device cleanup.

Runs notifications.tasks.cleanup_invalid_push_devices once a day.
"""

from django.db import migrations

TASK_NAME = "Notifications: Cleanup Invalid Push Devices"


def create_periodic_tasks(apps, schema_editor):
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule_1day, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="days",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "notifications.tasks.cleanup_invalid_push_devices",
            "interval": schedule_1day,
            "enabled": True,
            "description": (
                "Deletes OneSignal devices that have been invalid for 30 days."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("notifications", "0002_seed_notification_types"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
