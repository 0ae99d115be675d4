"""Replay of a recorded orchestrator event stream through the handlers."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from scenario_run_recorder.attachments import AttachmentRequest
from scenario_run_recorder.envelopes import (
    AttachmentContentEncoding,
    EnvelopeDecodeError,
    envelope_from_dict,
)

from .orchestrator_contracts import ScreenshotDetails, SpecFile, SpecResults, SpecTestOutcome
from .orchestrator_handlers import RecorderHandlers


class ReplayError(Exception):
    """Raised when a recorded orchestrator event cannot be replayed."""


def replay_events(handlers: RecorderHandlers, lines: Iterable[str]) -> int:
    """Feed every recorded event to ``handlers`` inside one run; returns the event count.

    Each line is a JSON object ``{"event": <handler name>, "data": {...}}``.
    """
    handlers.before_run()
    count = 0
    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ReplayError(f"line {line_number}: invalid JSON: {exc}") from exc
        if not isinstance(record, Mapping) or not isinstance(record.get("event"), str):
            raise ReplayError(f"line {line_number}: expected an object with an 'event' name")
        try:
            _dispatch(handlers, record["event"], record.get("data") or {})
        except (EnvelopeDecodeError, KeyError, TypeError, ValueError) as exc:
            raise ReplayError(
                f"line {line_number}: malformed {record['event']} event: {exc}"
            ) from exc
        count += 1
    handlers.after_run()
    return count


def replay_event_file(handlers: RecorderHandlers, events_path: Path | str) -> int:
    with Path(events_path).open("r", encoding="utf-8") as handle:
        return replay_events(handlers, handle)


def _dispatch(handlers: RecorderHandlers, event: str, data: Mapping[str, Any]) -> None:
    if event == "before_spec":
        handlers.before_spec(_spec_file(data))
    elif event == "after_spec":
        handlers.after_spec(_spec_file(data), _spec_results(data.get("results")))
    elif event == "spec_envelopes":
        handlers.spec_envelopes([envelope_from_dict(item) for item in data["messages"]])
    elif event == "test_case_started":
        handlers.test_case_started(_payload("testCaseStarted", data))
    elif event == "test_step_started":
        handlers.test_step_started(_payload("testStepStarted", data))
    elif event == "test_step_finished":
        handlers.test_step_finished(_payload("testStepFinished", data))
    elif event == "test_case_finished":
        handlers.test_case_finished(_payload("testCaseFinished", data))
    elif event == "create_string_attachment":
        handlers.create_string_attachment(
            AttachmentRequest(
                data=data["data"],
                media_type=data["mediaType"],
                encoding=AttachmentContentEncoding(data["encoding"]),
            )
        )
    elif event == "after_screenshot":
        details = ScreenshotDetails(path=Path(data["path"]), name=data.get("name"))
        handlers.after_screenshot(details)
    else:
        raise ReplayError(f"Unknown orchestrator event: {event}")


def _payload(key: str, data: Mapping[str, Any]) -> Any:
    return envelope_from_dict({key: data}).payload


def _spec_file(data: Mapping[str, Any]) -> SpecFile:
    name = data["name"]
    return SpecFile(name=name, relative=data.get("relative", name))


def _spec_results(value: Any) -> SpecResults | None:
    if value is None:
        return None
    return SpecResults(
        tests=tuple(
            SpecTestOutcome(title=test.get("title", ""), display_error=test.get("displayError"))
            for test in value.get("tests") or ()
        )
    )
