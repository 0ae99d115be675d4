"""Envelope entities describing one fact about a test run.

Payloads are the cucumber message dataclasses; this module adds the tagged
envelope holding exactly one of them and the run-finished marker written
without a success flag.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields
from typing import Any

from cucumber_messages import (
    Attachment,
    AttachmentContentEncoding,
    Background,
    Ci,
    Duration,
    Examples,
    Feature,
    FeatureChild,
    GherkinDocument,
    Git,
    Hook,
    Location,
    Meta,
    Pickle,
    PickleStep,
    PickleTag,
    Product,
    Rule,
    RuleChild,
    Scenario,
    Source,
    SourceMediaType,
    SourceReference,
    Step,
    Tag,
    TableRow,
    TestCase,
    TestCaseFinished,
    TestCaseStarted,
    TestRunStarted,
    TestStep,
    TestStepFinished,
    TestStepResult,
    TestStepResultStatus,
    TestStepStarted,
    Timestamp,
)

__all__ = [
    "Attachment",
    "AttachmentContentEncoding",
    "Background",
    "Ci",
    "Duration",
    "Envelope",
    "Examples",
    "Feature",
    "FeatureChild",
    "GherkinDocument",
    "Git",
    "Hook",
    "Location",
    "Meta",
    "Pickle",
    "PickleStep",
    "PickleTag",
    "Product",
    "Rule",
    "RuleChild",
    "Scenario",
    "Source",
    "SourceMediaType",
    "SourceReference",
    "Step",
    "TableRow",
    "Tag",
    "TestCase",
    "TestCaseFinished",
    "TestCaseStarted",
    "TestRunFinished",
    "TestRunStarted",
    "TestStep",
    "TestStepFinished",
    "TestStepResult",
    "TestStepResultStatus",
    "TestStepStarted",
    "Timestamp",
    "duration_to_nanos",
    "timestamp_now",
]


@dataclass
class TestRunFinished:
    """End of run marker.

    Carries no success flag: no reliable aggregate outcome can be computed
    from the lifecycle event stream alone.
    """

    __test__ = False

    timestamp: Timestamp


@dataclass(frozen=True)
class Envelope:  # pylint: disable=too-many-instance-attributes
    """Tagged record holding exactly one payload variant."""

    meta: Meta | None = None
    test_run_started: TestRunStarted | None = None
    test_run_finished: TestRunFinished | None = None
    source: Source | None = None
    gherkin_document: GherkinDocument | None = None
    pickle: Pickle | None = None
    hook: Hook | None = None
    test_case: TestCase | None = None
    test_case_started: TestCaseStarted | None = None
    test_step_started: TestStepStarted | None = None
    test_step_finished: TestStepFinished | None = None
    test_case_finished: TestCaseFinished | None = None
    attachment: Attachment | None = None
    _kind: str = field(init=False, repr=False, compare=False, default="")

    def __post_init__(self) -> None:
        populated = [
            item.name
            for item in fields(self)
            if item.init and getattr(self, item.name) is not None
        ]
        if len(populated) != 1:
            raise ValueError(
                f"Envelope must carry exactly one payload, got {len(populated)}: {populated}"
            )
        object.__setattr__(self, "_kind", populated[0])

    @property
    def kind(self) -> str:
        """Name of the populated payload field, e.g. ``test_case_started``."""
        return self._kind

    @property
    def payload(self) -> Any:
        return getattr(self, self._kind)


def timestamp_now() -> Timestamp:
    """Wall-clock instant split into seconds and nanoseconds."""
    seconds, nanos = divmod(time.time_ns(), 1_000_000_000)
    return Timestamp(seconds=seconds, nanos=nanos)


def duration_to_nanos(duration: Duration) -> int:
    return duration.seconds * 1_000_000_000 + duration.nanos
