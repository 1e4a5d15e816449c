"""
UploadedFile model for chat attachments.

The bytes live in the S3-compatible bucket; this row records who uploaded
what under which key so downloads and audits do not depend on bucket listing.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import BaseModel


class UploadedFile(BaseModel):
    """
    A file uploaded to object storage.

    Attributes:
        key: Object key in the bucket ({epoch_ms}-{random}.{ext})
        original_name: Client-supplied filename
        content_type: Declared MIME type (validated against the allow-list)
        size: Size in bytes
        url: Public URL of the object
        uploaded_by: User who uploaded the file
    """

    key = models.CharField(
        max_length=255,
        unique=True,
        help_text="Object key in the storage bucket",
    )
    original_name = models.CharField(
        max_length=255,
        help_text="Original name of the uploaded file",
    )
    content_type = models.CharField(
        max_length=127,
        help_text="MIME type of the file",
    )
    size = models.PositiveBigIntegerField(
        help_text="File size in bytes",
    )
    url = models.URLField(
        max_length=1024,
        help_text="Public URL of the stored object",
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="uploaded_files",
        help_text="User who uploaded this file",
    )

    class Meta:
        db_table = "media_uploaded_file"
        verbose_name = "uploaded file"
        verbose_name_plural = "uploaded files"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["uploaded_by", "-created_at"],
                name="media_upload_user_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.original_name} ({self.key})"
