"""
Object storage for chat attachments.

Talks to an S3-compatible bucket (Cloudflare R2 in production) with boto3:
- upload: PutObject with originalName / uploadedBy / uploadTime metadata
- fetch: GetObject for proxied downloads
- public URL construction and validation

Note: boto3 is imported lazily when the client is first needed.
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.utils import timezone

from core.exceptions import ExternalServiceError, NotFoundError
from core.services import BaseService

if TYPE_CHECKING:
    from typing import BinaryIO

# boto3 error codes that mean the object does not exist
MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


@dataclass
class StoredObject:
    """An object fetched from the bucket."""

    body: bytes
    content_type: str
    content_length: int


class ObjectStorageService(BaseService):
    """
    S3-compatible object storage client.

    Usage:
        storage = ObjectStorageService()
        key = storage.generate_key("report.pdf")
        storage.upload(fileobj, key, "application/pdf", metadata={...})
        url = storage.public_url(key)

        obj = storage.fetch(storage.key_from_url(url))

    Raises:
        NotFoundError: fetch of a missing key (error_code FILE_NOT_FOUND)
        ExternalServiceError: any other storage failure (error_code STORAGE_ERROR)
    """

    def __init__(
        self,
        bucket_name: str | None = None,
        public_base_url: str | None = None,
    ) -> None:
        self.bucket_name = bucket_name or settings.R2_BUCKET_NAME
        self.public_base_url = (public_base_url or settings.R2_PUBLIC_URL or "").rstrip("/")
        self._s3_client = None

    @property
    def s3_client(self):
        """Lazy-loaded boto3 S3 client pointed at the R2 endpoint."""
        if self._s3_client is None:
            import boto3
            from botocore.config import Config

            self._s3_client = boto3.client(
                "s3",
                endpoint_url=settings.R2_ENDPOINT_URL,
                aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
                region_name=settings.R2_REGION,
                config=Config(
                    connect_timeout=settings.R2_TIMEOUT_SECONDS,
                    read_timeout=settings.R2_TIMEOUT_SECONDS,
                    retries={"max_attempts": 2},
                ),
            )
        return self._s3_client

    # =========================================================================
    # Keys and URLs
    # =========================================================================

    @staticmethod
    def generate_key(original_name: str) -> str:
        """
        Build a unique object key: {epoch_ms}-{random}.{ext}.

        The extension comes from the original filename, "bin" when it has none.
        """
        ext = "bin"
        if "." in (original_name or ""):
            candidate = original_name.rsplit(".", 1)[1].lower()
            if candidate and candidate.isalnum() and len(candidate) <= 10:
                ext = candidate
        return f"{int(time.time() * 1000)}-{secrets.token_hex(6)}.{ext}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url: str) -> str | None:
        """
        Extract the object key from a public URL.

        Returns None when the URL is not under the public base URL, or when
        no public base URL is configured.
        """
        if not self.public_base_url:
            return None
        prefix = f"{self.public_base_url}/"
        if not url or not url.startswith(prefix):
            return None
        key = url[len(prefix):].split("?", 1)[0].split("#", 1)[0]
        if not key or ".." in key.split("/"):
            return None
        return key

    # =========================================================================
    # Operations
    # =========================================================================

    def upload(
        self,
        fileobj: BinaryIO,
        key: str,
        content_type: str,
        original_name: str,
        uploaded_by: str,
    ) -> None:
        """
        Store an object.

        Metadata mirrors what the web client expects when listing the bucket:
        originalName, uploadedBy and uploadTime (ISO 8601).
        """
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=fileobj,
                ContentType=content_type,
                Metadata={
                    "originalName": _ascii_metadata(original_name),
                    "uploadedBy": _ascii_metadata(uploaded_by),
                    "uploadTime": timezone.now().isoformat(),
                },
            )
        except (ClientError, BotoCoreError) as e:
            self.get_logger().exception(f"Upload of {key} to {self.bucket_name} failed")
            raise ExternalServiceError(
                "Failed to upload file",
                error_code="STORAGE_ERROR",
                details={"service": "object_storage"},
            ) from e

        self.get_logger().info(f"Uploaded {key} ({content_type}) to {self.bucket_name}")

    def fetch(self, key: str) -> StoredObject:
        """Fetch an object's bytes and content type."""
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            body = response["Body"].read()
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in MISSING_OBJECT_CODES:
                self.get_logger().warning(f"Object {key} not found in {self.bucket_name}")
                raise NotFoundError("File not found", error_code="FILE_NOT_FOUND") from e
            self.get_logger().exception(f"Fetch of {key} failed")
            raise ExternalServiceError(
                "Failed to download file", error_code="STORAGE_ERROR"
            ) from e
        except BotoCoreError as e:
            self.get_logger().exception(f"Fetch of {key} failed")
            raise ExternalServiceError(
                "Failed to download file", error_code="STORAGE_ERROR"
            ) from e

        return StoredObject(
            body=body,
            content_type=response.get("ContentType") or "application/octet-stream",
            content_length=response.get("ContentLength", len(body)),
        )


def _ascii_metadata(value: str) -> str:
    """S3 user metadata must be ASCII; replace anything else."""
    return (value or "").encode("ascii", "replace").decode("ascii")
