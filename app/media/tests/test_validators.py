"""
Tests for attachment validation.
"""

import pytest

from media.validators import AttachmentValidator, validate_attachment

TEXT_CONTENT = b"This is a test text file.\nWith multiple lines.\n"

# Minimal PDF structure recognized by libmagic
PDF_CONTENT = b"""%PDF-1.4
1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj
2 0 obj << /Type /Pages /Kids [] /Count 0 >> endobj
trailer << /Size 3 /Root 1 0 R >>
%%EOF"""


class TestAttachmentValidator:
    def test_allowed_type_passes(self):
        result = AttachmentValidator(max_size=1024).validate(
            "photo.png", "image/png", 100
        )

        assert result.is_valid
        assert result.media_type == "image"
        assert result.mime_type == "image/png"

    @pytest.mark.parametrize(
        "name,content_type,media_type",
        [
            ("clip.mp4", "video/mp4", "video"),
            ("notes.txt", "text/plain", "document"),
            ("song.mp3", "audio/mpeg", "audio"),
            (
                "cv.docx",
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "document",
            ),
        ],
    )
    def test_allow_list_categories(self, name, content_type, media_type):
        result = AttachmentValidator(max_size=1024).validate(name, content_type, 10)

        assert result.media_type == media_type

    def test_empty_file_rejected(self):
        result = AttachmentValidator(max_size=1024).validate("a.png", "image/png", 0)

        assert result.error_code == "EMPTY_FILE"

    def test_oversized_file_rejected(self):
        result = AttachmentValidator(max_size=2 * 1024 * 1024).validate(
            "a.png", "image/png", 2 * 1024 * 1024 + 1
        )

        assert result.error_code == "FILE_TOO_LARGE"
        assert "2MB" in result.error

    def test_disallowed_type_rejected(self):
        result = AttachmentValidator(max_size=1024).validate(
            "setup.exe", "application/x-msdownload", 10
        )

        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"

    def test_content_type_parameters_ignored(self):
        result = AttachmentValidator(max_size=1024).validate(
            "notes.txt", "text/plain; charset=utf-8", 10
        )

        assert result.mime_type == "text/plain"

    def test_specific_declared_type_trusted(self):
        result = AttachmentValidator(max_size=1024).validate(
            "photo.png", "image/png", 10, header=b"not really a png"
        )

        assert result.mime_type == "image/png"

    def test_generic_type_detected_from_content(self):
        result = AttachmentValidator(max_size=4096).validate(
            "notes", "application/octet-stream", len(TEXT_CONTENT), header=TEXT_CONTENT
        )

        assert result.is_valid
        assert result.mime_type == "text/plain"
        assert result.media_type == "document"

    def test_generic_pdf_detected_from_content(self):
        result = AttachmentValidator(max_size=4096).validate(
            "scan", "application/octet-stream", len(PDF_CONTENT), header=PDF_CONTENT
        )

        assert result.mime_type == "application/pdf"

    def test_generic_bytes_named_pdf_rejected(self):
        content = bytes(range(256)) * 4

        result = AttachmentValidator(max_size=4096).validate(
            "evil.pdf", "application/octet-stream", len(content), header=content
        )

        assert not result.is_valid
        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"

    def test_executable_with_generic_type_rejected(self):
        content = b"\x7fELF" + b"\x01\x01\x01\x00" + b"\x00" * 100

        result = AttachmentValidator(max_size=4096).validate(
            "photo.jpg", "application/octet-stream", len(content), header=content
        )

        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"

    def test_generic_type_without_content_rejected(self):
        result = AttachmentValidator(max_size=1024).validate(
            "report.pdf", "application/octet-stream", 10
        )

        assert result.error_code == "MIME_TYPE_NOT_ALLOWED"


class TestValidateAttachment:
    def test_uses_size_setting(self, settings):
        settings.UPLOAD_MAX_SIZE_MB = 1

        assert validate_attachment("a.pdf", "application/pdf", 1024 * 1024).is_valid
        assert (
            validate_attachment("a.pdf", "application/pdf", 1024 * 1024 + 1).error_code
            == "FILE_TOO_LARGE"
        )
