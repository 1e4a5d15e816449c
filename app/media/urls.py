"""
URL configuration for media app.

Media - Upload:
    POST /upload/       - Upload attachment

Media - Files:
    GET /download/      - Download attachment by public URL
"""

from django.urls import path

from media.views import FileDownloadView, FileUploadView

app_name = "media"

urlpatterns = [
    path("upload/", FileUploadView.as_view(), name="upload"),
    path("download/", FileDownloadView.as_view(), name="download"),
]
