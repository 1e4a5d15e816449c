"""
Tests for notifications app.

- test_models.py: model defaults and constraints
- test_services.py: NotificationService and DeviceService
- test_tasks.py: push / websocket delivery tasks
- test_onesignal.py: OneSignal client
- test_views.py: REST endpoints
"""
