"""
Test fixtures for media app.

Provides fixtures for:
- Users and authenticated clients
- A mocked boto3 S3 client wired into ObjectStorageService
- Sample uploads
"""

from __future__ import annotations

import io
from unittest.mock import MagicMock, PropertyMock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from authentication.tests.factories import UserFactory
from media.services import ObjectStorageService

PUBLIC_URL = "https://files.example.com"


@pytest.fixture(autouse=True)
def storage_settings(settings):
    settings.R2_PUBLIC_URL = PUBLIC_URL
    settings.R2_BUCKET_NAME = "chat-test"
    settings.UPLOAD_MAX_SIZE_MB = 50


@pytest.fixture
def user(db):
    return UserFactory(username="ana", email="ana@netnode.ag")


@pytest.fixture
def authenticated_client(authenticated_client_factory, user):
    return authenticated_client_factory(user)


@pytest.fixture
def mock_s3_client():
    """Mock boto3 S3 client with successful default responses."""
    client = MagicMock()
    client.put_object.return_value = {"ETag": '"etag"'}
    client.get_object.return_value = {
        "Body": io.BytesIO(b"%PDF-1.4 test"),
        "ContentType": "application/pdf",
        "ContentLength": 13,
    }
    return client


@pytest.fixture
def patched_s3(mocker, mock_s3_client):
    """Every ObjectStorageService in the test uses mock_s3_client."""
    mocker.patch.object(
        ObjectStorageService,
        "s3_client",
        new_callable=PropertyMock,
        return_value=mock_s3_client,
    )
    return mock_s3_client


@pytest.fixture
def storage(mock_s3_client):
    service = ObjectStorageService()
    service._s3_client = mock_s3_client
    return service


@pytest.fixture
def pdf_file():
    return SimpleUploadedFile(
        "report.pdf", b"%PDF-1.4 test", content_type="application/pdf"
    )
