"""
Media models package.

Exports:
    UploadedFile: Record of a chat attachment stored in object storage
"""

from media.models.uploaded_file import UploadedFile

__all__ = [
    "UploadedFile",
]
