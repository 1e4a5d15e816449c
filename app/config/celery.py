"""
Celery application.

Redis is the broker and result backend. Tasks are discovered from each
installed app's tasks.py:
    - authentication.tasks: magic-link email, expired token cleanup
    - chat.tasks: mention and direct message notifications
    - notifications.tasks: push and websocket delivery, device cleanup

Periodic tasks live in django-celery-beat (DatabaseScheduler) and are seeded
by data migrations.

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("chat")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
