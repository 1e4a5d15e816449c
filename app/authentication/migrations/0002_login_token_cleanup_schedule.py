"""
Add the Celery Beat schedule for login token cleanup.

Runs authentication.tasks.cleanup_expired_login_tokens every hour.
"""

from django.db import migrations

TASK_NAME = "Auth: Cleanup Expired Login Tokens"


def create_periodic_tasks(apps, schema_editor):
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule_1hour, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "authentication.tasks.cleanup_expired_login_tokens",
            "interval": schedule_1hour,
            "enabled": True,
            "description": (
                "Deletes used magic-link tokens and tokens that expired "
                "more than a day ago."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("authentication", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
