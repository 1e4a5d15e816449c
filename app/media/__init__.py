"""
Media app for chat attachments.

This app provides:
- Upload of attachments to an S3-compatible bucket (Cloudflare R2)
- MIME type allow-list and size limit validation
- Proxied downloads with attachment disposition
"""
