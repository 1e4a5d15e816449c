"""
ViewSets and views for chat API.

This module provides REST API endpoints for the chat system:
- RoomViewSet: Rooms, room messages and room mention read state
- ThreadView: A message and its replies
- DirectMessageView / DirectMessageReadView: Direct messages
- UnreadView: Badge counts

URL Structure:
    /api/v1/chat/rooms/                       GET, POST
    /api/v1/chat/rooms/{id}/                  GET
    /api/v1/chat/rooms/{id}/messages/         GET, POST
    /api/v1/chat/rooms/{id}/mentions/read/    POST
    /api/v1/chat/threads/{id}/                GET
    /api/v1/chat/direct-messages/             GET (?user_id=), POST
    /api/v1/chat/direct-messages/read/        POST
    /api/v1/chat/unread/                      GET

Design Decisions:
    - Every authenticated user can read and post in every room
    - Lists are returned whole, oldest first (no pagination)
    - All operations use the service layer for business logic
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.helpers import parse_int
from core.views import result_error_response
from chat.serializers import (
    DirectMessageCreateSerializer,
    DirectMessageSerializer,
    MarkDirectReadSerializer,
    MarkedReadSerializer,
    MessageCreateSerializer,
    MessageSerializer,
    RoomCreateSerializer,
    RoomSerializer,
    ThreadSerializer,
    UnreadCountsSerializer,
)
from chat.services import (
    DirectMessageService,
    MentionService,
    MessageService,
    RoomService,
    UnreadService,
)


def sent_response(result, serializer_class) -> Response:
    """201 for a new message, 200 when the send was a duplicate."""
    sent = result.data
    return Response(
        serializer_class(sent.message).data,
        status=status.HTTP_201_CREATED if sent.created else status.HTTP_200_OK,
    )


@extend_schema_view(
    list=extend_schema(
        operation_id="list_rooms",
        summary="List rooms",
        description="All rooms ordered by name.",
        tags=["Chat - Rooms"],
    ),
    retrieve=extend_schema(
        operation_id="get_room",
        summary="Get room",
        tags=["Chat - Rooms"],
    ),
    create=extend_schema(
        operation_id="create_room",
        summary="Create room",
        description="Create a room. Names are unique regardless of case.",
        request=RoomCreateSerializer,
        responses={
            201: RoomSerializer,
            400: OpenApiResponse(description="Validation error"),
            409: OpenApiResponse(description="Room name already exists"),
        },
        tags=["Chat - Rooms"],
    ),
)
class RoomViewSet(viewsets.GenericViewSet):
    """
    ViewSet for rooms.

    list:      GET /rooms/
    create:    POST /rooms/
    retrieve:  GET /rooms/{id}/
    messages:  GET, POST /rooms/{id}/messages/
    mentions_read: POST /rooms/{id}/mentions/read/
    """

    permission_classes = [IsAuthenticated]
    serializer_class = RoomSerializer
    pagination_class = None
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        return RoomService.list_rooms()

    def list(self, request):
        return Response(RoomSerializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        return Response(RoomSerializer(self.get_object()).data)

    def create(self, request):
        serializer = RoomCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RoomService.create_room(
            name=serializer.validated_data["name"],
            description=serializer.validated_data["description"],
            created_by=request.user,
        )
        if not result.success:
            return result_error_response(result)

        return Response(RoomSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=["GET"],
        operation_id="list_room_messages",
        summary="List room messages",
        description=(
            "Top-level messages of the room, oldest first. Replies are fetched "
            "through the thread endpoint."
        ),
        responses={200: MessageSerializer(many=True)},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_room_message",
        summary="Send room message",
        description=(
            "Post a message, a file, or a reply (parent_message_id). A repeat of "
            "the same message within one second returns the original with 200."
        ),
        request=MessageCreateSerializer,
        responses={
            200: OpenApiResponse(
                response=MessageSerializer, description="Duplicate of a recent message"
            ),
            201: MessageSerializer,
            400: OpenApiResponse(description="Empty, too long, or invalid parent"),
            404: OpenApiResponse(description="Room not found"),
        },
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        room = self.get_object()

        if request.method == "GET":
            messages = MessageService.list_messages(room)
            return Response(MessageSerializer(messages, many=True).data)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            room=room,
            sender=request.user,
            **serializer.validated_data,
        )
        if not result.success:
            return result_error_response(result)

        return sent_response(result, MessageSerializer)

    @extend_schema(
        operation_id="mark_room_mentions_read",
        summary="Mark room mentions read",
        description="Mark the caller's unread mentions in this room as read.",
        request=None,
        responses={200: MarkedReadSerializer},
        tags=["Chat - Unread"],
    )
    @action(detail=True, methods=["post"], url_path="mentions/read")
    def mentions_read(self, request, pk=None):
        room = self.get_object()

        result = MentionService.mark_room_read(request.user, room.id)
        if not result.success:
            return result_error_response(result)

        return Response(MarkedReadSerializer({"marked_count": result.data}).data)


class ThreadView(APIView):
    """
    GET /api/v1/chat/threads/{id}/
        A message and its replies, oldest first.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_thread",
        summary="Get thread",
        responses={
            200: ThreadSerializer,
            404: OpenApiResponse(description="Parent message not found"),
        },
        tags=["Chat - Messages"],
    )
    def get(self, request, pk):
        result = MessageService.get_thread(pk)
        if not result.success:
            return result_error_response(result)

        return Response(ThreadSerializer(result.data).data)


class DirectMessageView(APIView):
    """
    GET /api/v1/chat/direct-messages/?user_id=X
        Conversation with user X, both directions, oldest first.

    POST /api/v1/chat/direct-messages/
        Send a direct message.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_direct_messages",
        summary="List direct messages",
        parameters=[
            OpenApiParameter(
                "user_id",
                OpenApiTypes.INT,
                required=True,
                description="The other participant",
            ),
        ],
        responses={
            200: DirectMessageSerializer(many=True),
            400: OpenApiResponse(description="user_id missing or invalid"),
        },
        tags=["Chat - Direct Messages"],
    )
    def get(self, request):
        other_user_id = parse_int(request.query_params.get("user_id"))
        if other_user_id is None:
            return Response(
                {"error": "A valid user_id is required", "error_code": "INVALID_USER_ID"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        messages = DirectMessageService.list_conversation(request.user, other_user_id)
        return Response(DirectMessageSerializer(messages, many=True).data)

    @extend_schema(
        operation_id="send_direct_message",
        summary="Send direct message",
        description=(
            "Send a message or file to another user. A repeat of the same "
            "message within one second returns the original with 200."
        ),
        request=DirectMessageCreateSerializer,
        responses={
            200: OpenApiResponse(
                response=DirectMessageSerializer,
                description="Duplicate of a recent message",
            ),
            201: DirectMessageSerializer,
            400: OpenApiResponse(description="Empty, too long, or sent to self"),
            404: OpenApiResponse(description="Receiver not found"),
        },
        tags=["Chat - Direct Messages"],
    )
    def post(self, request):
        serializer = DirectMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DirectMessageService.send_direct_message(
            sender=request.user,
            **serializer.validated_data,
        )
        if not result.success:
            return result_error_response(result)

        return sent_response(result, DirectMessageSerializer)


class DirectMessageReadView(APIView):
    """
    POST /api/v1/chat/direct-messages/read/
        Mark messages from user_id to the caller as read.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="mark_direct_messages_read",
        summary="Mark direct messages read",
        request=MarkDirectReadSerializer,
        responses={200: MarkedReadSerializer},
        tags=["Chat - Direct Messages"],
    )
    def post(self, request):
        serializer = MarkDirectReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = DirectMessageService.mark_as_read(
            request.user, serializer.validated_data["user_id"]
        )
        return Response(MarkedReadSerializer({"marked_count": result.data}).data)


class UnreadView(APIView):
    """
    GET /api/v1/chat/unread/
        Unread mentions per room and unread direct messages per sender.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_unread_counts",
        summary="Get unread counts",
        description='Badge counts; the *_display maps cap values at "9+".',
        responses={200: UnreadCountsSerializer},
        tags=["Chat - Unread"],
    )
    def get(self, request):
        return Response(UnreadCountsSerializer(UnreadService.summary(request.user)).data)
