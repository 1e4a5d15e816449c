"""Django admin configuration for media app."""

from django.contrib import admin

from media.models import UploadedFile


@admin.register(UploadedFile)
class UploadedFileAdmin(admin.ModelAdmin):
    list_display = ("original_name", "content_type", "size", "uploaded_by", "created_at")
    list_filter = ("content_type",)
    search_fields = ("original_name", "key", "uploaded_by__email")
    raw_id_fields = ("uploaded_by",)
    readonly_fields = ("key", "url", "created_at", "updated_at")
