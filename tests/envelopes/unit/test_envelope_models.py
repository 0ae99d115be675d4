"""Envelope model tests."""

from __future__ import annotations

import pytest
from scenario_run_recorder.envelopes import (
    Duration,
    Envelope,
    Hook,
    SourceReference,
    TestRunStarted,
    Timestamp,
    duration_to_nanos,
    timestamp_now,
)


def _hook(hook_id: str, name: str | None = None) -> Hook:
    return Hook(id=hook_id, name=name, source_reference=SourceReference(uri="support/hooks.py"))


def test_envelope_reports_kind_and_payload_of_populated_field() -> None:
    hook = _hook("hook-1", "reset database")

    envelope = Envelope(hook=hook)

    assert envelope.kind == "hook"
    assert envelope.payload is hook


def test_envelope_without_payload_is_rejected() -> None:
    with pytest.raises(ValueError, match="exactly one payload, got 0"):
        Envelope()


def test_envelope_with_two_payloads_is_rejected() -> None:
    with pytest.raises(ValueError, match="exactly one payload, got 2"):
        Envelope(
            hook=_hook("hook-1"),
            test_run_started=TestRunStarted(timestamp=Timestamp(seconds=1, nanos=0)),
        )


def test_envelopes_with_equal_payloads_compare_equal() -> None:
    assert Envelope(hook=_hook("hook-1")) == Envelope(hook=_hook("hook-1"))
    assert Envelope(hook=_hook("hook-1")) != Envelope(hook=_hook("hook-2"))


def test_timestamp_now_splits_nanoseconds() -> None:
    timestamp = timestamp_now()

    assert timestamp.seconds > 1_600_000_000
    assert 0 <= timestamp.nanos < 1_000_000_000


def test_duration_to_nanos() -> None:
    assert duration_to_nanos(Duration(seconds=2, nanos=500)) == 2_000_000_500
