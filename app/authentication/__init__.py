"""
Authentication application.

Email-identified users with a chat role, Google sign-in restricted to
company domains, magic-link login and admin user management.

Key components:
    - User model: email login, unique username, user/admin role
    - LoginToken model: single-use magic-link tokens
    - AuthService / UserAdminService: business logic
    - Social adapters: Google domain restriction and profile population

Usage:
    from authentication.models import User
    from authentication.services import AuthService
"""
