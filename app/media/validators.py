"""
Attachment validators.

Validates the upload against a single size limit (UPLOAD_MAX_SIZE_MB, default
50MB) and its MIME type against the chat allow-list. A specific declared type is
taken as-is; a generic one is replaced by python-magic detection on the first
2KB of content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import magic
from django.conf import settings

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

ALLOWED_MIME_TYPES: dict[str, set[str]] = {
    "image": {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    },
    "video": {
        "video/mp4",
        "video/webm",
    },
    "document": {
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    },
    "audio": {
        "audio/mpeg",
        "audio/wav",
    },
}

# Browsers report generic types for some files; detect those from content
GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})

# Bytes read for magic number detection
HEADER_SIZE = 2048


def max_upload_size() -> int:
    """Upload size limit in bytes."""
    return settings.UPLOAD_MAX_SIZE_MB * 1024 * 1024


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ValidationResult:
    """Result of file validation.

    Attributes:
        is_valid: Whether the file passed validation.
        media_type: Category of the file (image, video, document, audio).
        mime_type: Effective MIME type of the file.
        error: Human-readable error message if validation failed.
        error_code: Machine-readable error code if validation failed.
    """

    is_valid: bool
    media_type: str | None = None
    mime_type: str | None = None
    error: str | None = None
    error_code: str | None = None


# =============================================================================
# Validator Class
# =============================================================================


class AttachmentValidator:
    """Validates chat attachments.

    Example:
        result = AttachmentValidator().validate(
            name="report.pdf", content_type="application/pdf", size=1024
        )
        if not result.is_valid:
            return Response({"error": result.error}, status=400)
    """

    def __init__(
        self,
        allowed_mime_types: dict[str, set[str]] | None = None,
        max_size: int | None = None,
    ) -> None:
        self._allowed_mime_types = allowed_mime_types or ALLOWED_MIME_TYPES
        self._max_size = max_size if max_size is not None else max_upload_size()
        self._magic = magic.Magic(mime=True)

    def validate(
        self,
        name: str,
        content_type: str | None,
        size: int,
        header: bytes = b"",
    ) -> ValidationResult:
        """Validate an upload.

        Checks, in order: empty file, size limit, MIME allow-list.

        Args:
            name: Original filename (used only in log messages).
            content_type: MIME type declared by the client.
            size: Upload size in bytes.
            header: Leading bytes of the content, used when the declared
                type is generic.
        """
        if size <= 0:
            return ValidationResult(
                is_valid=False,
                error="File is empty",
                error_code="EMPTY_FILE",
            )

        if size > self._max_size:
            limit_mb = self._max_size // (1024 * 1024)
            return ValidationResult(
                is_valid=False,
                error=f"File size exceeds {limit_mb}MB limit",
                error_code="FILE_TOO_LARGE",
            )

        mime_type = self.effective_mime_type(content_type, header)
        if mime_type != (content_type or "").split(";")[0].strip().lower():
            logger.debug(f"Detected {mime_type or 'unknown'} for generic upload '{name}'")
        media_type = self._get_media_type(mime_type)
        if media_type is None:
            return ValidationResult(
                is_valid=False,
                error=f"File type '{mime_type or 'unknown'}' is not allowed",
                error_code="MIME_TYPE_NOT_ALLOWED",
            )

        return ValidationResult(
            is_valid=True,
            media_type=media_type,
            mime_type=mime_type,
        )

    def effective_mime_type(self, content_type: str | None, header: bytes = b"") -> str:
        """Declared content type, or the type detected from content when generic."""
        declared = (content_type or "").split(";")[0].strip().lower()
        if declared not in GENERIC_MIME_TYPES:
            return declared
        detected = self._detect_mime_type(header)
        return (detected or declared).lower()

    def _detect_mime_type(self, header: bytes) -> str | None:
        """Detect MIME type from leading content bytes using libmagic."""
        if not header:
            return None
        try:
            return self._magic.from_buffer(header[:HEADER_SIZE])
        except magic.MagicException:
            logger.warning("MIME detection failed", exc_info=True)
            return None

    def _get_media_type(self, mime_type: str) -> str | None:
        for media_type, allowed_types in self._allowed_mime_types.items():
            if mime_type in allowed_types:
                return media_type
        return None


def validate_attachment(
    name: str,
    content_type: str | None,
    size: int,
    header: bytes = b"",
) -> ValidationResult:
    """Validate an upload using default settings."""
    return AttachmentValidator().validate(name, content_type, size, header)
