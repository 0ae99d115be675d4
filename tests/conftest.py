"""Shared builders for scenario data and lifecycle events."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from scenario_run_recorder.envelopes import (
    Attachment,
    AttachmentContentEncoding,
    Duration,
    Envelope,
    Feature,
    FeatureChild,
    GherkinDocument,
    Hook,
    Location,
    Pickle,
    PickleStep,
    Scenario,
    SourceReference,
    Step,
    TestCase,
    TestCaseFinished,
    TestCaseStarted,
    TestStep,
    TestStepFinished,
    TestStepResult,
    TestStepResultStatus,
    TestStepStarted,
    Timestamp,
)
from scenario_run_recorder.lifecycle import LifecycleSession
from scenario_run_recorder.run_log import RunLogStore

FEATURE_URI = "features/login.feature"


def _login_feature() -> Feature:
    steps = [
        Step(
            id="st-1",
            keyword="Given ",
            text="a registered user",
            location=Location(line=4, column=5),
        ),
        Step(
            id="st-2",
            keyword="Then ",
            text="the dashboard is shown",
            location=Location(line=5, column=5),
        ),
    ]
    scenario = Scenario(
        id="sc-1",
        keyword="Scenario",
        name="Successful login",
        description="",
        location=Location(line=3, column=3),
        steps=steps,
        examples=[],
        tags=[],
    )
    return Feature(
        keyword="Feature",
        name="Login",
        description="",
        language="en",
        location=Location(line=1, column=1),
        tags=[],
        children=[FeatureChild(scenario=scenario)],
    )


def build_scenario_data(
    uri: str = FEATURE_URI, *, with_hook: bool = False
) -> tuple[Envelope, ...]:
    """Document, pickle and test case for a two-step 'Successful login' scenario."""
    test_steps = [
        TestStep(id="ts-1", pickle_step_id="ps-1"),
        TestStep(id="ts-2", pickle_step_id="ps-2"),
    ]
    envelopes: list[Envelope] = [
        Envelope(
            gherkin_document=GherkinDocument(uri=uri, feature=_login_feature(), comments=[])
        ),
        Envelope(
            pickle=Pickle(
                id="pickle-1",
                uri=uri,
                name="Successful login",
                language="en",
                steps=[
                    PickleStep(id="ps-1", text="a registered user", ast_node_ids=["st-1"]),
                    PickleStep(id="ps-2", text="the dashboard is shown", ast_node_ids=["st-2"]),
                ],
                tags=[],
                ast_node_ids=["sc-1"],
            )
        ),
    ]
    if with_hook:
        envelopes.append(
            Envelope(
                hook=Hook(
                    id="hook-1",
                    name="reset database",
                    source_reference=SourceReference(uri="support/hooks.py"),
                )
            )
        )
        test_steps.insert(0, TestStep(id="ts-hook", hook_id="hook-1"))
    envelopes.append(
        Envelope(test_case=TestCase(id="tc-1", pickle_id="pickle-1", test_steps=test_steps))
    )
    return tuple(envelopes)


class LifecycleEvents:
    """Builders for the payloads of lifecycle notifications."""

    @staticmethod
    def test_case_started(
        test_case_started_id: str = "tcs-1", test_case_id: str = "tc-1"
    ) -> TestCaseStarted:
        return TestCaseStarted(
            id=test_case_started_id,
            test_case_id=test_case_id,
            attempt=0,
            timestamp=Timestamp(seconds=1, nanos=0),
        )

    @staticmethod
    def test_step_started(
        test_step_id: str, test_case_started_id: str = "tcs-1"
    ) -> TestStepStarted:
        return TestStepStarted(
            test_case_started_id=test_case_started_id,
            test_step_id=test_step_id,
            timestamp=Timestamp(seconds=2, nanos=0),
        )

    @staticmethod
    def test_step_finished(
        test_step_id: str,
        test_case_started_id: str = "tcs-1",
        status: TestStepResultStatus = TestStepResultStatus.passed,
        message: str | None = None,
    ) -> TestStepFinished:
        return TestStepFinished(
            test_case_started_id=test_case_started_id,
            test_step_id=test_step_id,
            test_step_result=TestStepResult(
                status=status,
                duration=Duration(seconds=0, nanos=1_500_000),
                message=message,
            ),
            timestamp=Timestamp(seconds=3, nanos=0),
        )

    @staticmethod
    def test_case_finished(test_case_started_id: str = "tcs-1") -> TestCaseFinished:
        return TestCaseFinished(
            test_case_started_id=test_case_started_id,
            timestamp=Timestamp(seconds=4, nanos=0),
            will_be_retried=False,
        )


class RecordingChannel:
    """Live formatter channel double that keeps what it receives."""

    def __init__(self) -> None:
        self.envelopes: list[Envelope] = []
        self.closed = False

    def on_envelope(self, envelope: Envelope) -> None:
        assert not self.closed, "envelope forwarded to a closed channel"
        self.envelopes.append(envelope)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def scenario_data() -> Callable[..., tuple[Envelope, ...]]:
    return build_scenario_data


@pytest.fixture
def events() -> type[LifecycleEvents]:
    return LifecycleEvents


@pytest.fixture
def message_log_path(tmp_path: Path) -> Path:
    return tmp_path / "reports" / "messages.ndjson"


@pytest.fixture
def session(message_log_path: Path) -> LifecycleSession:
    return LifecycleSession(RunLogStore(message_log_path))


@pytest.fixture
def recording_channels() -> list[RecordingChannel]:
    return []


@pytest.fixture
def pretty_session(
    message_log_path: Path, recording_channels: list[RecordingChannel]
) -> tuple[LifecycleSession, list[str]]:
    """Session with live formatting enabled; returns the session and its echoed lines."""
    echoed: list[str] = []

    def open_channel() -> RecordingChannel:
        channel = RecordingChannel()
        recording_channels.append(channel)
        return channel

    return LifecycleSession(RunLogStore(message_log_path), open_channel, echo=echoed.append), echoed


def build_completed_spec(*, will_be_retried: bool = False) -> tuple[Envelope, ...]:
    """Envelopes of a spec whose scenario passes the first step and fails the second."""
    events = LifecycleEvents
    return build_scenario_data(with_hook=True) + (
        Envelope(test_case_started=events.test_case_started()),
        Envelope(test_step_started=events.test_step_started("ts-hook")),
        Envelope(test_step_finished=events.test_step_finished("ts-hook")),
        Envelope(test_step_started=events.test_step_started("ts-1")),
        Envelope(
            attachment=Attachment(
                test_case_started_id="tcs-1",
                test_step_id="ts-1",
                body="<b>logged in</b>",
                media_type="text/plain",
                content_encoding=AttachmentContentEncoding.identity,
            )
        ),
        Envelope(test_step_finished=events.test_step_finished("ts-1")),
        Envelope(test_step_started=events.test_step_started("ts-2")),
        Envelope(
            test_step_finished=events.test_step_finished(
                "ts-2", status=TestStepResultStatus.failed, message="dashboard missing"
            )
        ),
        Envelope(
            test_case_finished=TestCaseFinished(
                test_case_started_id="tcs-1",
                timestamp=Timestamp(seconds=4, nanos=0),
                will_be_retried=will_be_retried,
            )
        ),
    )


@pytest.fixture
def completed_spec() -> Callable[..., tuple[Envelope, ...]]:
    return build_completed_spec
