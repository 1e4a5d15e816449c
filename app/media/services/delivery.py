"""
FileDeliveryService for proxied attachment downloads.

Files are fetched from the bucket and streamed back through the API so the
browser always saves them (the public bucket URL would render inline).
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from django.http import HttpResponse

from core.services import BaseService, ServiceResult
from media.services.storage import ObjectStorageService

if TYPE_CHECKING:
    from media.services.storage import StoredObject

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class FileDeliveryService(BaseService):
    """
    Download attachments by their public URL.

    Usage:
        result = FileDeliveryService.resolve_key(url)
        if not result.success:
            return result_error_response(result)
        obj = storage.fetch(result.data)
        return FileDeliveryService.attachment_response(obj, filename)
    """

    @classmethod
    def resolve_key(
        cls, url: str, storage: ObjectStorageService | None = None
    ) -> ServiceResult[str]:
        """Map a public URL to its object key; INVALID_URL if it is not ours."""
        storage = storage or ObjectStorageService()
        key = storage.key_from_url(url)
        if key is None:
            cls.get_logger().warning(f"Rejected download of foreign URL: {url}")
            return ServiceResult.failure("Invalid file URL", error_code="INVALID_URL")
        return ServiceResult.success(key)

    @classmethod
    def attachment_response(cls, stored: StoredObject, filename: str) -> HttpResponse:
        """
        Build an attachment response with caching disabled.

        Args:
            stored: Object fetched from storage
            filename: Name the browser should save the file as
        """
        response = HttpResponse(stored.body, content_type=stored.content_type)
        response["Content-Disposition"] = (
            f'attachment; filename="{cls._encode_filename(filename)}"'
        )
        response["Content-Length"] = str(len(stored.body))
        for header, value in NO_CACHE_HEADERS.items():
            response[header] = value
        return response

    @classmethod
    def _encode_filename(cls, filename: str) -> str:
        """
        Encode filename for Content-Disposition header.

        Handles spaces, quotes and unicode by percent-encoding everything.
        """
        return quote(filename, safe="")
