"""
Tests for UploadService and FileDeliveryService.
"""

import pytest
from botocore.exceptions import ClientError
from django.core.files.uploadedfile import SimpleUploadedFile

from media.models import UploadedFile
from media.services import FileDeliveryService, StoredObject, UploadService


@pytest.mark.django_db
class TestUploadService:
    def test_upload_records_file(self, user, storage, mock_s3_client, pdf_file):
        result = UploadService.upload(pdf_file, user, storage=storage)

        assert result.success
        record = result.data
        assert record.original_name == "report.pdf"
        assert record.content_type == "application/pdf"
        assert record.size == len(b"%PDF-1.4 test")
        assert record.url == f"https://files.example.com/{record.key}"
        assert record.uploaded_by == user
        assert record.key.endswith(".pdf")
        mock_s3_client.put_object.assert_called_once()

    def test_invalid_file_not_uploaded(self, user, storage, mock_s3_client):
        exe = SimpleUploadedFile("setup.exe", b"MZ", content_type="application/x-msdownload")

        result = UploadService.upload(exe, user, storage=storage)

        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"
        mock_s3_client.put_object.assert_not_called()
        assert not UploadedFile.objects.exists()

    def test_generic_upload_is_checked_against_its_content(self, user, storage, mock_s3_client):
        disguised = SimpleUploadedFile(
            "evil.pdf", bytes(range(256)) * 4, content_type="application/octet-stream"
        )

        result = UploadService.upload(disguised, user, storage=storage)

        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"
        mock_s3_client.put_object.assert_not_called()

    def test_generic_text_upload_stored_with_detected_type(
        self, user, storage, mock_s3_client
    ):
        notes = SimpleUploadedFile(
            "notes", b"Meeting notes\nSecond line\n", content_type="application/octet-stream"
        )

        result = UploadService.upload(notes, user, storage=storage)

        assert result.success
        assert result.data.content_type == "text/plain"
        assert mock_s3_client.put_object.call_args.kwargs["ContentType"] == "text/plain"

    def test_storage_failure_returns_storage_error(
        self, user, storage, mock_s3_client, pdf_file
    ):
        mock_s3_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "InternalError", "Message": "boom"}}, "PutObject"
        )

        result = UploadService.upload(pdf_file, user, storage=storage)

        assert result.error_code == "STORAGE_ERROR"
        assert not UploadedFile.objects.exists()


class TestFileDeliveryService:
    def test_resolve_key(self, storage):
        result = FileDeliveryService.resolve_key(
            "https://files.example.com/1-a.pdf", storage
        )

        assert result.data == "1-a.pdf"

    def test_resolve_foreign_url_fails(self, storage):
        result = FileDeliveryService.resolve_key("https://elsewhere.com/1-a.pdf", storage)

        assert result.error_code == "INVALID_URL"

    def test_attachment_response_headers(self):
        stored = StoredObject(body=b"abc", content_type="text/plain", content_length=3)

        response = FileDeliveryService.attachment_response(stored, "my notes.txt")

        assert response["Content-Type"] == "text/plain"
        assert response["Content-Disposition"] == 'attachment; filename="my%20notes.txt"'
        assert response["Content-Length"] == "3"
        assert "no-store" in response["Cache-Control"]
        assert response["Pragma"] == "no-cache"
