"""Newline-delimited JSON encoding of envelopes."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from cucumber_messages import message_converter
from cucumber_messages.json_converter import camel_to_snake, snake_to_camel

from .envelope_models import (
    Attachment,
    Envelope,
    GherkinDocument,
    Hook,
    Meta,
    Pickle,
    Source,
    TestCase,
    TestCaseFinished,
    TestCaseStarted,
    TestRunFinished,
    TestRunStarted,
    TestStepFinished,
    TestStepStarted,
)

_PAYLOAD_TYPES: dict[str, type[Any]] = {
    "meta": Meta,
    "test_run_started": TestRunStarted,
    "test_run_finished": TestRunFinished,
    "source": Source,
    "gherkin_document": GherkinDocument,
    "pickle": Pickle,
    "hook": Hook,
    "test_case": TestCase,
    "test_case_started": TestCaseStarted,
    "test_step_started": TestStepStarted,
    "test_step_finished": TestStepFinished,
    "test_case_finished": TestCaseFinished,
    "attachment": Attachment,
}


class EnvelopeDecodeError(Exception):
    """Raised when a record cannot be decoded into an envelope."""


def serialize_envelope(envelope: Envelope) -> str:
    """Return the single-line JSON form of an envelope (no trailing newline)."""
    return json.dumps(envelope_to_dict(envelope), ensure_ascii=False, separators=(",", ":"))


def parse_envelope_line(line: str) -> Envelope:
    """Parse one NDJSON record into an envelope."""
    try:
        record = json.loads(line)
    except json.JSONDecodeError as exc:
        raise EnvelopeDecodeError(f"Invalid envelope record: {exc}") from exc
    return envelope_from_dict(record)


def iter_envelopes(lines: Iterable[str]) -> Iterator[Envelope]:
    """Parse a stream of NDJSON lines, skipping blank lines."""
    for line in lines:
        stripped = line.strip()
        if stripped:
            yield parse_envelope_line(stripped)


def envelope_to_dict(envelope: Envelope) -> dict[str, Any]:
    """Camel-case JSON object of an envelope; absent optional fields are omitted."""
    return {snake_to_camel(envelope.kind): message_converter.to_dict(envelope.payload)}


def envelope_from_dict(record: Any) -> Envelope:
    if not isinstance(record, Mapping) or len(record) != 1:
        raise EnvelopeDecodeError("Envelope record must be an object with exactly one key.")
    ((key, value),) = record.items()
    kind = camel_to_snake(key)
    payload_type = _PAYLOAD_TYPES.get(kind)
    if payload_type is None:
        raise EnvelopeDecodeError(f"Unknown envelope type: {key}")
    if not isinstance(value, Mapping):
        raise EnvelopeDecodeError(f"{key} must be an object.")
    try:
        payload = message_converter.from_dict(dict(value), payload_type)
    except (TypeError, ValueError) as exc:
        raise EnvelopeDecodeError(f"Malformed {key} envelope: {exc}") from exc
    return Envelope(**{kind: payload})
