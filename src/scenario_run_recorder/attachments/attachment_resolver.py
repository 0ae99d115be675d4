"""Attachment construction and validation against the open test step."""

from __future__ import annotations

import base64
from collections.abc import Sequence
from dataclasses import dataclass

from scenario_run_recorder.envelopes import (
    Attachment,
    AttachmentContentEncoding,
    Envelope,
    find_open_test_step,
)

BASE64_MEDIA_TYPE_PREFIX = "base64:"
DEFAULT_TEXT_MEDIA_TYPE = "text/plain"
SCREENSHOT_MEDIA_TYPE = "image/png"


class InvalidAttachmentError(Exception):
    """Raised when attachment data has an unsupported shape."""


@dataclass(frozen=True)
class AttachmentRequest:
    """Attachment body ready to be bound to a test step."""

    data: str
    media_type: str
    encoding: AttachmentContentEncoding


def build_attachment_request(
    data: str | bytes | bytearray, media_type: str | None = None
) -> AttachmentRequest:
    """Normalize ``attach(data, media_type)`` arguments.

    Text defaults to ``text/plain`` and is stored as-is, unless the media type
    carries the ``base64:`` prefix, in which case the text is taken to be
    base64 already and the prefix is stripped. Binary data requires a media
    type and is always base64-encoded.
    """
    if isinstance(data, str):
        resolved_media_type = media_type if media_type is not None else DEFAULT_TEXT_MEDIA_TYPE
        if resolved_media_type.startswith(BASE64_MEDIA_TYPE_PREFIX):
            return AttachmentRequest(
                data=data,
                media_type=resolved_media_type[len(BASE64_MEDIA_TYPE_PREFIX) :],
                encoding=AttachmentContentEncoding.base64,
            )
        return AttachmentRequest(
            data=data,
            media_type=resolved_media_type,
            encoding=AttachmentContentEncoding.identity,
        )
    if isinstance(data, bytes | bytearray):
        if not isinstance(media_type, str):
            raise InvalidAttachmentError("Binary attachments must specify a media type")
        return AttachmentRequest(
            data=base64.b64encode(bytes(data)).decode("ascii"),
            media_type=media_type,
            encoding=AttachmentContentEncoding.base64,
        )
    raise InvalidAttachmentError("Invalid attachment data: must be bytes or str")


def screenshot_attachment_request(image: bytes) -> AttachmentRequest:
    return build_attachment_request(image, SCREENSHOT_MEDIA_TYPE)


def resolve_attachment(
    envelopes: Sequence[Envelope],
    test_case_started_id: str,
    test_step_id: str,
    request: AttachmentRequest,
) -> Envelope:
    """Build an attachment envelope for the open (test case, test step) pair.

    Raises:
      MissingReferenceError: If the pair does not resolve to a step of a test
        case recorded in ``envelopes``.
    """
    find_open_test_step(envelopes, test_case_started_id, test_step_id)
    return Envelope(
        attachment=Attachment(
            test_case_started_id=test_case_started_id,
            test_step_id=test_step_id,
            body=request.data,
            media_type=request.media_type,
            content_encoding=request.encoding,
        )
    )
