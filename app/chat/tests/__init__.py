"""
Tests for chat app.

- test_models.py: model constraints and properties
- test_mentions.py / test_dedup.py / test_links.py: pure helpers
- test_realtime.py: channel names and publishing
- test_authorization.py: channel subscription rules
- test_services.py: room, message, direct message and unread services
- test_tasks.py: mention and direct message notifications
- test_views.py: REST endpoints
- test_consumers.py: websocket consumer and JWT middleware
"""
