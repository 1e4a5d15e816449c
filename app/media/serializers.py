"""
Serializers for media endpoints.
"""

from rest_framework import serializers

from media.models import UploadedFile


class FileUploadSerializer(serializers.Serializer):
    """Multipart upload request."""

    file = serializers.FileField(
        allow_empty_file=True,
        error_messages={"required": "No file provided", "null": "No file provided"},
    )


class UploadedFileSerializer(serializers.ModelSerializer):
    """
    Upload response, in the shape the chat client attaches to a message.

    filename is the object key; url is the public URL.
    """

    filename = serializers.CharField(source="key", read_only=True)
    originalName = serializers.CharField(source="original_name", read_only=True)
    type = serializers.CharField(source="content_type", read_only=True)

    class Meta:
        model = UploadedFile
        fields = ["filename", "originalName", "size", "type", "url"]
        read_only_fields = fields


class FileDownloadQuerySerializer(serializers.Serializer):
    """Query parameters for a proxied download."""

    url = serializers.CharField()
    filename = serializers.CharField(max_length=255)
