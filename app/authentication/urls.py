"""
URL configuration for authentication app.

URL structure (mounted at /api/v1/):
    auth/login/                     - Email/password login (dj-rest-auth)
    auth/logout/                    - Logout, blacklists the refresh token (dj-rest-auth)
    auth/user/                      - Current user (dj-rest-auth)
    auth/token/refresh/             - Refresh access token (dj-rest-auth)
    auth/google/                    - Google OAuth2 login
    auth/magic-link/                - Request a magic link
    auth/magic-link/verify/         - Exchange a magic link for tokens
    users/                          - User directory
    users/{id}/                     - User detail
    admin/users/                    - Admin: list/create users
    admin/users/{id}/               - Admin: update/delete user
    admin/users/{id}/login-link/    - Admin: generate a magic link

Note:
    There is no registration endpoint; accounts come from admins or
    Google sign-in on an allowed domain.
"""

from dj_rest_auth.jwt_auth import get_refresh_view
from dj_rest_auth.views import LoginView, LogoutView, UserDetailsView
from django.urls import include, path
from rest_framework.routers import SimpleRouter

from authentication.views import (
    AdminUserViewSet,
    GoogleLoginView,
    MagicLinkRequestView,
    MagicLinkVerifyView,
    UserViewSet,
)

app_name = "authentication"

router = SimpleRouter()
router.register(r"users", UserViewSet, basename="user")
router.register(r"admin/users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    # dj-rest-auth
    path("auth/login/", LoginView.as_view(), name="rest_login"),
    path("auth/logout/", LogoutView.as_view(), name="rest_logout"),
    path("auth/user/", UserDetailsView.as_view(), name="rest_user_details"),
    path("auth/token/refresh/", get_refresh_view().as_view(), name="token_refresh"),
    # Social authentication
    path("auth/google/", GoogleLoginView.as_view(), name="google-login"),
    # Magic links
    path("auth/magic-link/", MagicLinkRequestView.as_view(), name="magic-link"),
    path(
        "auth/magic-link/verify/",
        MagicLinkVerifyView.as_view(),
        name="magic-link-verify",
    ),
    path("", include(router.urls)),
]
