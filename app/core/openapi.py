"""
OpenAPI schema customizations for drf-spectacular.

dj-rest-auth views carry no @extend_schema, so this hook gives them readable
summaries and the "Auth" tags. Local views set tags= themselves.

Tag naming follows the pattern: [App Name] - [Group Name]
Examples:
- Auth - User (current user and user directory)
- Chat - Rooms (room list and creation)
- Media - Upload (attachment uploads)
"""

# Maps operation_id to (summary, description)
DJ_REST_AUTH_SUMMARIES = {
    "auth_login_create": (
        "Log in",
        "Authenticate with email and password to receive JWT tokens.",
    ),
    "auth_logout_create": (
        "Log out",
        "Blacklist the given refresh token.",
    ),
    "auth_user_retrieve": (
        "Get current user",
        "Retrieve the currently authenticated user's details.",
    ),
    "auth_user_update": (
        "Update current user",
        "Full update of the currently authenticated user's details.",
    ),
    "auth_user_partial_update": (
        "Partially update current user",
        "Partial update of the currently authenticated user's details.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "Login, logout, Google sign-in, magic links and token refresh.",
    },
    {
        "name": "Auth - User",
        "description": "Current user and the user directory used for @mentions.",
    },
    {
        "name": "Auth - Admin",
        "description": "Account administration for chat admins.",
    },
    {
        "name": "Chat - Rooms",
        "description": "Public rooms.",
    },
    {
        "name": "Chat - Messages",
        "description": "Room messages and threaded replies.",
    },
    {
        "name": "Chat - Direct Messages",
        "description": "One-to-one conversations.",
    },
    {
        "name": "Chat - Unread",
        "description": "Unread mention and direct message badges.",
    },
    {
        "name": "Media - Upload",
        "description": "Attachment upload to object storage.",
    },
    {
        "name": "Media - Files",
        "description": "Attachment download.",
    },
    {
        "name": "Notifications",
        "description": "Notification inbox and push device registration.",
    },
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook for the generated schema.

    - Adds natural language summaries to dj-rest-auth endpoints
    - Tags auth_user_* operations "Auth - User" and other auth_* operations "Auth"
    - Publishes tag descriptions for ReDoc
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in DJ_REST_AUTH_SUMMARIES:
                summary, description = DJ_REST_AUTH_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_user_"):
                operation["tags"] = ["Auth - User"]
            elif operation_id.startswith("auth_"):
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result
