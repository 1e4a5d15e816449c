"""
UploadService: validate, store and record a chat attachment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import ExternalServiceError
from core.services import BaseService, ServiceResult
from media.services.storage import ObjectStorageService
from media.validators import HEADER_SIZE, validate_attachment

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile as DjangoUploadedFile

    from authentication.models import User
    from media.models import UploadedFile


class UploadService(BaseService):
    """
    Upload pipeline for attachments.

    Flow:
        1. Validate size and MIME type (content-sniffed when the declared type is generic)
        2. Generate a unique key and PutObject to the bucket
        3. Record an UploadedFile row

    Error codes:
        EMPTY_FILE, FILE_TOO_LARGE, MIME_TYPE_NOT_ALLOWED -> 400
        STORAGE_ERROR -> 502
    """

    @classmethod
    def upload(
        cls,
        file: DjangoUploadedFile,
        user: User,
        storage: ObjectStorageService | None = None,
    ) -> ServiceResult[UploadedFile]:
        from media.models import UploadedFile

        file.seek(0)
        header = file.read(HEADER_SIZE)
        validation = validate_attachment(file.name, file.content_type, file.size, header)
        if not validation.is_valid:
            cls.get_logger().info(
                f"Rejected upload '{file.name}' from user {user.id}: {validation.error_code}"
            )
            return ServiceResult.failure(validation.error, error_code=validation.error_code)

        storage = storage or ObjectStorageService()
        key = storage.generate_key(file.name)

        try:
            file.seek(0)
            storage.upload(
                file,
                key,
                content_type=validation.mime_type,
                original_name=file.name,
                uploaded_by=user.username,
            )
        except ExternalServiceError as e:
            return ServiceResult.failure(e.message, error_code=e.error_code)

        record = UploadedFile.objects.create(
            key=key,
            original_name=file.name,
            content_type=validation.mime_type,
            size=file.size,
            url=storage.public_url(key),
            uploaded_by=user,
        )
        cls.get_logger().info(f"User {user.id} uploaded {key} ({file.size} bytes)")
        return ServiceResult.success(record)
