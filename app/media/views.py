"""
API views for chat attachments.

Provides:
- FileUploadView: Validate and store an attachment in the bucket
- FileDownloadView: Proxy an attachment download with attachment disposition
"""

from __future__ import annotations

import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ExternalServiceError, NotFoundError
from core.views import result_error_response
from media.serializers import (
    FileDownloadQuerySerializer,
    FileUploadSerializer,
    UploadedFileSerializer,
)
from media.services import FileDeliveryService, ObjectStorageService, UploadService

logger = logging.getLogger(__name__)


class FileUploadView(APIView):
    """
    POST /api/v1/media/upload/
        Upload an attachment (multipart/form-data, field "file").

    Response:
        201 Created: {"filename", "originalName", "size", "type", "url"}
        400 Bad Request: Missing file, too large, or type not allowed
        502 Bad Gateway: Object storage failure
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="upload_attachment",
        summary="Upload attachment",
        description=(
            "Upload a chat attachment to object storage. Allowed: JPEG, PNG, GIF, "
            "WebP, PDF, plain text, Word, MP4, WebM, MP3 and WAV up to 50MB."
        ),
        request={"multipart/form-data": FileUploadSerializer},
        responses={
            201: OpenApiResponse(
                response=UploadedFileSerializer,
                description="File uploaded successfully",
            ),
            400: OpenApiResponse(description="Missing file, too large or type not allowed"),
            502: OpenApiResponse(description="Object storage failure"),
        },
        tags=["Media - Upload"],
    )
    def post(self, request):
        serializer = FileUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "No file provided", "error_code": "NO_FILE"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = UploadService.upload(serializer.validated_data["file"], request.user)
        if not result.success:
            return result_error_response(result)

        return Response(
            UploadedFileSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class FileDownloadView(APIView):
    """
    GET /api/v1/media/download/?url=...&filename=...
        Download an attachment from our bucket as a file.

    Response:
        200 OK: File bytes with Content-Disposition: attachment
        400 Bad Request: Missing parameters or URL outside our bucket
        404 Not Found: Object does not exist
        502 Bad Gateway: Object storage failure
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="download_attachment",
        summary="Download attachment",
        description=(
            "Fetch an attachment by its public URL and return it with an "
            "attachment Content-Disposition and caching disabled."
        ),
        parameters=[
            OpenApiParameter("url", OpenApiTypes.STR, description="Public file URL"),
            OpenApiParameter("filename", OpenApiTypes.STR, description="Download filename"),
        ],
        responses={
            (200, "application/octet-stream"): OpenApiTypes.BINARY,
            400: OpenApiResponse(description="Missing parameters or invalid file URL"),
            404: OpenApiResponse(description="File not found"),
            502: OpenApiResponse(description="Object storage failure"),
        },
        tags=["Media - Files"],
    )
    def get(self, request):
        query = FileDownloadQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {"error": "URL and filename are required", "error_code": "MISSING_PARAMS"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        storage = ObjectStorageService()
        key_result = FileDeliveryService.resolve_key(query.validated_data["url"], storage)
        if not key_result.success:
            return result_error_response(key_result)

        try:
            stored = storage.fetch(key_result.data)
        except NotFoundError as e:
            return Response(e.to_dict(), status=status.HTTP_404_NOT_FOUND)
        except ExternalServiceError as e:
            return Response(e.to_dict(), status=status.HTTP_502_BAD_GATEWAY)

        logger.info(f"User {request.user.id} downloaded {key_result.data}")
        return FileDeliveryService.attachment_response(
            stored, query.validated_data["filename"]
        )
