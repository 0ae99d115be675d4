"""Envelopes written at the boundaries of a run."""

from __future__ import annotations

import os
import platform
import sys
from collections.abc import Mapping

from ci_environment import detect_ci_environment
from cucumber_messages import message_converter

from scenario_run_recorder import __version__
from scenario_run_recorder.envelopes import (
    Ci,
    Envelope,
    Meta,
    Product,
    TestRunFinished,
    TestRunStarted,
    timestamp_now,
)

PROTOCOL_VERSION = "24.0.1"
IMPLEMENTATION_NAME = "scenario-run-recorder"


def detect_ci(environ: Mapping[str, str]) -> Ci | None:
    """CI provider the run executes on, or None outside CI.

    Remote URLs are reported without credentials.
    """
    detected = detect_ci_environment(dict(environ))
    if detected is None:
        return None
    return message_converter.from_dict(detected, Ci)


def build_meta_envelope(environ: Mapping[str, str] | None = None) -> Envelope:
    """Describe the protocol, this implementation, the host and any CI provider."""
    env = os.environ if environ is None else environ
    return Envelope(
        meta=Meta(
            protocol_version=PROTOCOL_VERSION,
            implementation=Product(name=IMPLEMENTATION_NAME, version=__version__),
            runtime=Product(name="python", version=platform.python_version()),
            os=Product(name=sys.platform, version=platform.release()),
            cpu=Product(name=platform.machine()),
            ci=detect_ci(env),
        )
    )


def build_test_run_started_envelope() -> Envelope:
    return Envelope(test_run_started=TestRunStarted(timestamp=timestamp_now()))


def build_test_run_finished_envelope() -> Envelope:
    return Envelope(test_run_finished=TestRunFinished(timestamp=timestamp_now()))
