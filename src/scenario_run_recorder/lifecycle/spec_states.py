"""Spec run state variants.

Exactly one variant is current at a time. Each carries only the data that is
meaningful in that state: the live formatter channel (``None`` when live
formatting is disabled) and the envelopes buffered for the current spec,
which are committed to the run log only when the spec finishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from scenario_run_recorder.envelopes import Envelope
from scenario_run_recorder.live_formatting import EnvelopeObserver


@dataclass(frozen=True)
class Initial:
    name: ClassVar[str] = "initial"


@dataclass(frozen=True)
class BeforeSpec:
    name: ClassVar[str] = "before-spec"

    pretty: EnvelopeObserver | None


@dataclass(frozen=True)
class ReceivedScenarioData:
    name: ClassVar[str] = "received-scenario-data"

    pretty: EnvelopeObserver | None
    messages: tuple[Envelope, ...]


@dataclass(frozen=True)
class TestStarted:
    __test__ = False
    name: ClassVar[str] = "test-started"

    pretty: EnvelopeObserver | None
    messages: tuple[Envelope, ...]
    test_case_started_id: str


@dataclass(frozen=True)
class StepStarted:
    name: ClassVar[str] = "step-started"

    pretty: EnvelopeObserver | None
    messages: tuple[Envelope, ...]
    test_case_started_id: str
    test_step_started_id: str


@dataclass(frozen=True)
class StepFinished:
    name: ClassVar[str] = "step-finished"

    pretty: EnvelopeObserver | None
    messages: tuple[Envelope, ...]
    test_case_started_id: str


@dataclass(frozen=True)
class TestFinished:
    __test__ = False
    name: ClassVar[str] = "test-finished"

    pretty: EnvelopeObserver | None
    messages: tuple[Envelope, ...]


@dataclass(frozen=True)
class AfterSpec:
    name: ClassVar[str] = "after-spec"


SpecRunState = (
    Initial
    | BeforeSpec
    | ReceivedScenarioData
    | TestStarted
    | StepStarted
    | StepFinished
    | TestFinished
    | AfterSpec
)

BufferingState = ReceivedScenarioData | TestStarted | StepStarted | StepFinished | TestFinished
