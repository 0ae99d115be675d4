"""Attachment exports."""

from .attachment_resolver import (
    AttachmentRequest,
    InvalidAttachmentError,
    build_attachment_request,
    resolve_attachment,
    screenshot_attachment_request,
)

__all__ = [
    "AttachmentRequest",
    "InvalidAttachmentError",
    "build_attachment_request",
    "resolve_attachment",
    "screenshot_attachment_request",
]
