# Generated manually - initial media schema

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """
    Create UploadedFile, the record of attachments stored in object storage.
    """

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UploadedFile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "key",
                    models.CharField(
                        help_text="Object key in the storage bucket",
                        max_length=255,
                        unique=True,
                    ),
                ),
                (
                    "original_name",
                    models.CharField(
                        help_text="Original name of the uploaded file", max_length=255
                    ),
                ),
                (
                    "content_type",
                    models.CharField(help_text="MIME type of the file", max_length=127),
                ),
                ("size", models.PositiveBigIntegerField(help_text="File size in bytes")),
                (
                    "url",
                    models.URLField(
                        help_text="Public URL of the stored object", max_length=1024
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        help_text="User who uploaded this file",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="uploaded_files",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "uploaded file",
                "verbose_name_plural": "uploaded files",
                "db_table": "media_uploaded_file",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["uploaded_by", "-created_at"],
                        name="media_upload_user_idx",
                    )
                ],
            },
        ),
    ]
