"""
Authentication views.

- Google sign-in (dj-rest-auth SocialLoginView)
- Magic-link request / verification
- User directory (any authenticated user)
- Admin user management (chat admins only)

Related files:
    - serializers.py: Request/response serialization
    - services/: AuthService, UserAdminService
    - urls.py: URL routing
    - adapters.py: Google domain restriction

Note:
    Credential login, logout, token refresh and the current user are
    served by dj-rest-auth:
    - Login: /api/v1/auth/login/
    - Logout: /api/v1/auth/logout/
    - Refresh: /api/v1/auth/token/refresh/
    - Current user: /api/v1/auth/user/
"""

from allauth.socialaccount.providers.google.views import GoogleOAuth2Adapter
from dj_rest_auth.registration.views import SocialLoginView
from django.contrib.auth import user_logged_in
from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.permissions import IsChatAdmin
from authentication.serializers import (
    AdminUserCreateSerializer,
    AdminUserUpdateSerializer,
    LoginLinkSerializer,
    LoginResponseSerializer,
    MagicLinkRequestSerializer,
    MagicLinkVerifySerializer,
    UserSerializer,
)
from authentication.services import AuthService, UserAdminService
from core.helpers import parse_int
from core.views import result_error_response


def issue_tokens(request, user):
    """
    Issue a JWT pair for user, as dj-rest-auth does on login.

    Returns:
        {"access", "refresh", "user"} response payload
    """
    refresh = RefreshToken.for_user(user)
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user": UserSerializer(user).data,
    }


def invalid_id_response():
    return Response(
        {"error": "Invalid user ID", "error_code": "INVALID_ID"},
        status=status.HTTP_400_BAD_REQUEST,
    )


# =============================================================================
# Sign-in Views
# =============================================================================


@extend_schema(
    summary="Sign in with Google",
    description=(
        "Authenticate using a Google OAuth2 access_token or id_token. Only "
        "company email domains (GOOGLE_ALLOWED_DOMAINS) are accepted; the "
        "account is created on first sign-in."
    ),
    tags=["Auth"],
)
class GoogleLoginView(SocialLoginView):
    """
    POST: Authenticate with a Google OAuth2 token

    URL: /api/v1/auth/google/

    Request body:
        {"access_token": "..."} or {"id_token": "..."}

    Returns:
        {"access": "...", "refresh": "...", "user": {...}}

    Errors:
        403: Email domain not allowed
    """

    adapter_class = GoogleOAuth2Adapter


class MagicLinkRequestView(APIView):
    """
    POST: Email a one-time sign-in link

    URL: /api/v1/auth/magic-link/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Request a magic link",
        description="Send a single-use sign-in link to an existing user's email.",
        tags=["Auth"],
        request=MagicLinkRequestSerializer,
        responses={
            200: OpenApiResponse(description="Link sent"),
            400: OpenApiResponse(description="Email missing or malformed"),
            404: OpenApiResponse(
                description="No account for this email",
                examples=[
                    OpenApiExample(
                        "Unknown user",
                        value={
                            "error": "User not found. Please contact an administrator.",
                            "error_code": "USER_NOT_FOUND",
                        },
                    )
                ],
            ),
        },
    )
    def post(self, request):
        serializer = MagicLinkRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.request_magic_link(serializer.validated_data["email"])
        if not result.success:
            return result_error_response(result)

        return Response(
            {"success": True, "message": "Magic link sent to your email"},
            status=status.HTTP_200_OK,
        )


class MagicLinkVerifyView(APIView):
    """
    POST: Exchange a magic-link token for JWT tokens

    URL: /api/v1/auth/magic-link/verify/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Verify a magic link",
        description="Consume a magic-link token and issue JWT tokens.",
        tags=["Auth"],
        request=MagicLinkVerifySerializer,
        responses={
            200: LoginResponseSerializer,
            400: OpenApiResponse(description="Invalid, expired or used token"),
        },
    )
    def post(self, request):
        serializer = MagicLinkVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AuthService.verify_magic_link(serializer.validated_data["token"])
        if not result.success:
            return result_error_response(result)

        return Response(issue_tokens(request, result.data))


# =============================================================================
# User Directory
# =============================================================================


@extend_schema(tags=["Auth - User"])
class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Directory of chat users, used for DMs and @mention autocomplete.

    Endpoints:
        GET /api/v1/users/       - All users, newest first
        GET /api/v1/users/{id}/  - One user
    """

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    queryset = User.objects.filter(is_active=True).order_by("-date_joined")

    @extend_schema(summary="List users")
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        summary="Get user",
        responses={200: UserSerializer, 400: OpenApiResponse(description="Invalid ID")},
    )
    def retrieve(self, request, *args, **kwargs):
        if parse_int(kwargs.get("pk")) is None:
            return invalid_id_response()
        return super().retrieve(request, *args, **kwargs)


# =============================================================================
# Admin User Management
# =============================================================================


@extend_schema(tags=["Auth - Admin"])
class AdminUserViewSet(viewsets.ViewSet):
    """
    User management for chat admins.

    Endpoints:
        GET    /api/v1/admin/users/                  - List users
        POST   /api/v1/admin/users/                  - Create user
        PUT    /api/v1/admin/users/{id}/             - Update user (partial)
        PATCH  /api/v1/admin/users/{id}/             - Update user (partial)
        DELETE /api/v1/admin/users/{id}/             - Delete user
        POST   /api/v1/admin/users/{id}/login-link/  - Generate magic link
    """

    permission_classes = [IsAuthenticated, IsChatAdmin]

    @extend_schema(summary="List users (admin)", responses={200: UserSerializer(many=True)})
    def list(self, request):
        users = User.objects.order_by("-date_joined")
        return Response(UserSerializer(users, many=True).data)

    @extend_schema(
        summary="Create user",
        request=AdminUserCreateSerializer,
        responses={
            201: UserSerializer,
            409: OpenApiResponse(description="Email or username already exists"),
        },
    )
    def create(self, request):
        serializer = AdminUserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = UserAdminService.create_user(**serializer.validated_data)
        if not result.success:
            return result_error_response(result)

        return Response(UserSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update user",
        request=AdminUserUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(description="No valid fields to update"),
            404: OpenApiResponse(description="User not found"),
            409: OpenApiResponse(description="Email or username already exists"),
        },
    )
    def update(self, request, pk=None):
        user_id = parse_int(pk)
        if user_id is None:
            return invalid_id_response()

        serializer = AdminUserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        result = UserAdminService.update_user(user_id, serializer.validated_data)
        if not result.success:
            return result_error_response(result)

        return Response(UserSerializer(result.data).data)

    @extend_schema(
        summary="Partially update user",
        request=AdminUserUpdateSerializer,
        responses={200: UserSerializer},
    )
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(
        summary="Delete user",
        responses={
            204: None,
            400: OpenApiResponse(description="Cannot delete your own account"),
            404: OpenApiResponse(description="User not found"),
        },
    )
    def destroy(self, request, pk=None):
        user_id = parse_int(pk)
        if user_id is None:
            return invalid_id_response()

        result = UserAdminService.delete_user(user_id, acting_user=request.user)
        if not result.success:
            return result_error_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        summary="Generate login link",
        description="Create a single-use magic link for a user without emailing it.",
        request=None,
        responses={201: LoginLinkSerializer, 404: OpenApiResponse(description="User not found")},
    )
    @action(detail=True, methods=["post"], url_path="login-link")
    def login_link(self, request, pk=None):
        user_id = parse_int(pk)
        if user_id is None:
            return invalid_id_response()

        user = User.objects.filter(id=user_id, is_active=True).first()
        if user is None:
            return Response(
                {"error": "User not found", "error_code": "USER_NOT_FOUND"},
                status=status.HTTP_404_NOT_FOUND,
            )

        login_token = AuthService.create_login_token(user, created_by=request.user)
        data = LoginLinkSerializer(
            {
                "url": AuthService.build_login_url(login_token.token),
                "expires_at": login_token.expires_at,
            }
        ).data
        return Response(data, status=status.HTTP_201_CREATED)
