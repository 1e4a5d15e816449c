"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User, UserManager and LoginToken
- test_services.py: AuthService and UserAdminService
- test_views.py: API endpoint tests
- test_adapters.py: Google sign-in adapter rules
- test_tasks.py: Celery task tests

Usage:
    pytest app/authentication/tests/
"""
