"""Media services for attachment storage, upload and delivery."""

from media.services.delivery import FileDeliveryService
from media.services.storage import ObjectStorageService, StoredObject
from media.services.upload import UploadService

__all__ = [
    "FileDeliveryService",
    "ObjectStorageService",
    "StoredObject",
    "UploadService",
]
