"""
Tests for ObjectStorageService with a mocked boto3 client.
"""

import re

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from core.exceptions import ExternalServiceError, NotFoundError
from media.services import ObjectStorageService

PUBLIC_URL = "https://files.example.com"


def client_error(code, operation="GetObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class TestKeys:
    def test_generate_key_keeps_extension(self):
        key = ObjectStorageService.generate_key("Report.PDF")

        assert re.fullmatch(r"\d{13}-[0-9a-f]{12}\.pdf", key)

    def test_generate_key_without_extension(self):
        assert ObjectStorageService.generate_key("README").endswith(".bin")

    def test_generate_key_ignores_odd_extension(self):
        assert ObjectStorageService.generate_key("a.tar gz").endswith(".bin")

    def test_keys_are_unique(self):
        first = ObjectStorageService.generate_key("a.png")
        second = ObjectStorageService.generate_key("a.png")

        assert first != second

    def test_public_url(self, storage):
        assert storage.public_url("k.png") == f"{PUBLIC_URL}/k.png"

    def test_key_from_url(self, storage):
        assert storage.key_from_url(f"{PUBLIC_URL}/123-abc.png") == "123-abc.png"

    def test_key_from_url_strips_query(self, storage):
        assert storage.key_from_url(f"{PUBLIC_URL}/123-abc.png?v=1") == "123-abc.png"

    @pytest.mark.parametrize(
        "url",
        [
            "https://evil.example.com/123-abc.png",
            f"{PUBLIC_URL}/",
            f"{PUBLIC_URL}/../secret",
            "",
        ],
    )
    def test_key_from_foreign_url_is_none(self, storage, url):
        assert storage.key_from_url(url) is None

    @pytest.mark.parametrize("url", ["/123-abc.png", "https://anywhere.com/123-abc.png"])
    def test_key_from_url_without_public_base_url_is_none(self, settings, url):
        settings.R2_PUBLIC_URL = ""

        assert ObjectStorageService().key_from_url(url) is None


class TestUpload:
    def test_put_object_with_metadata(self, storage, mock_s3_client):
        storage.upload(
            b"data",
            "123-abc.pdf",
            content_type="application/pdf",
            original_name="Résumé.pdf",
            uploaded_by="ana",
        )

        kwargs = mock_s3_client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "chat-test"
        assert kwargs["Key"] == "123-abc.pdf"
        assert kwargs["ContentType"] == "application/pdf"
        assert kwargs["Metadata"]["originalName"] == "R?sum?.pdf"
        assert kwargs["Metadata"]["uploadedBy"] == "ana"
        assert "uploadTime" in kwargs["Metadata"]

    def test_client_error_becomes_storage_error(self, storage, mock_s3_client):
        mock_s3_client.put_object.side_effect = client_error("AccessDenied", "PutObject")

        with pytest.raises(ExternalServiceError) as exc_info:
            storage.upload(b"x", "k", "text/plain", "a.txt", "ana")

        assert exc_info.value.error_code == "STORAGE_ERROR"


class TestFetch:
    def test_returns_body_and_type(self, storage):
        stored = storage.fetch("123-abc.pdf")

        assert stored.body == b"%PDF-1.4 test"
        assert stored.content_type == "application/pdf"
        assert stored.content_length == 13

    def test_missing_key_raises_not_found(self, storage, mock_s3_client):
        mock_s3_client.get_object.side_effect = client_error("NoSuchKey")

        with pytest.raises(NotFoundError) as exc_info:
            storage.fetch("gone.pdf")

        assert exc_info.value.error_code == "FILE_NOT_FOUND"

    def test_connection_error_raises_storage_error(self, storage, mock_s3_client):
        mock_s3_client.get_object.side_effect = EndpointConnectionError(
            endpoint_url="https://r2.example.com"
        )

        with pytest.raises(ExternalServiceError):
            storage.fetch("k.pdf")
