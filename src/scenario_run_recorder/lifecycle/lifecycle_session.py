"""Lifecycle state machine for one test run."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path

import click

from scenario_run_recorder.attachments import (
    AttachmentRequest,
    resolve_attachment,
    screenshot_attachment_request,
)
from scenario_run_recorder.envelopes import (
    Envelope,
    MissingReferenceError,
    TestCaseFinished,
    TestCaseStarted,
    TestStepFinished,
    TestStepStarted,
    last_index_of,
)
from scenario_run_recorder.live_formatting import ChannelFactory, EnvelopeObserver
from scenario_run_recorder.run_log import RunLogStore

from .lifecycle_errors import ProtocolViolationError
from .spec_states import (
    AfterSpec,
    BeforeSpec,
    BufferingState,
    Initial,
    ReceivedScenarioData,
    SpecRunState,
    StepFinished,
    StepStarted,
    TestFinished,
    TestStarted,
)
from .step_resolution import OnAfterStep, StepHookParameter, resolve_scenario_step

logger = logging.getLogger(__name__)


class LifecycleSession:
    """Validates lifecycle events against the current spec state and records them.

    One session exists per run. Events must be delivered sequentially; every
    event arriving in a state that cannot accept it raises
    ``ProtocolViolationError`` and leaves the state untouched.
    """

    def __init__(
        self,
        run_log: RunLogStore,
        open_channel: ChannelFactory | None = None,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        self._run_log = run_log
        self._open_channel = open_channel
        self._echo = echo
        self._state: SpecRunState = Initial()

    @property
    def state(self) -> SpecRunState:
        """Current state, exposed read-only for diagnostics."""
        return self._state

    def spec_about_to_start(self) -> None:
        state = self._state
        if isinstance(state, Initial | AfterSpec):
            pretty = self._open_channel() if self._open_channel is not None else None
            self._state = BeforeSpec(pretty=pretty)
            return
        if isinstance(state, BeforeSpec | StepStarted):
            # A repeated start while a step is open means the host reloaded the
            # spec mid-test; the follow-up scenario data event rolls back.
            logger.debug("spec_about_to_start() ignored in state %s", state.name)
            return
        raise ProtocolViolationError("spec_about_to_start", state.name)

    def static_scenario_data_received(self, envelopes: Sequence[Envelope]) -> None:
        state = self._state
        received = tuple(envelopes)
        if isinstance(state, BeforeSpec):
            _forward(state.pretty, received)
            self._state = ReceivedScenarioData(pretty=state.pretty, messages=received)
            return
        if isinstance(state, StepStarted):
            self._state = self._roll_back_reloaded_test(state, received)
            return
        raise ProtocolViolationError("static_scenario_data_received", state.name)

    def test_case_started(self, started: TestCaseStarted) -> None:
        state = self._state
        if not isinstance(state, ReceivedScenarioData | TestFinished):
            raise ProtocolViolationError("test_case_started", state.name)
        envelope = Envelope(test_case_started=started)
        _forward(state.pretty, (envelope,))
        self._state = TestStarted(
            pretty=state.pretty,
            messages=state.messages + (envelope,),
            test_case_started_id=started.id,
        )

    def test_step_started(self, started: TestStepStarted) -> None:
        state = self._state
        # step-started is accepted again after an error inside a step was rescued.
        if not isinstance(state, TestStarted | StepFinished | StepStarted):
            raise ProtocolViolationError("test_step_started", state.name)
        envelope = Envelope(test_step_started=started)
        _forward(state.pretty, (envelope,))
        self._state = StepStarted(
            pretty=state.pretty,
            messages=state.messages + (envelope,),
            test_case_started_id=state.test_case_started_id,
            test_step_started_id=started.test_step_id,
        )

    def test_step_finished(
        self,
        finished: TestStepFinished,
        on_after_step: OnAfterStep | None = None,
    ) -> None:
        """Close the open step.

        Live output receives ``testStepFinished`` before the callback runs; the
        buffer records the callback's attachments ahead of it.
        """
        state = self._state
        if not isinstance(state, StepStarted):
            raise ProtocolViolationError("test_step_finished", state.name)
        envelope = Envelope(test_step_finished=finished)
        _forward(state.pretty, (envelope,))
        resolved = resolve_scenario_step(
            state.messages, finished.test_case_started_id, finished.test_step_id
        )
        if resolved is not None and on_after_step is not None:
            parameter = StepHookParameter(
                gherkin_document=resolved.gherkin_document,
                pickle=resolved.pickle,
                pickle_step=resolved.pickle_step,
                test_case_started_id=finished.test_case_started_id,
                test_step_id=finished.test_step_id,
                result=finished.test_step_result,
            )
            on_after_step(parameter)
            for request in parameter.attachments:
                self.string_attachment_requested(request)
        settled = self._state
        if not isinstance(settled, StepStarted):
            raise ProtocolViolationError("test_step_finished", settled.name)
        self._state = StepFinished(
            pretty=settled.pretty,
            messages=settled.messages + (envelope,),
            test_case_started_id=settled.test_case_started_id,
        )

    def test_case_finished(self, finished: TestCaseFinished) -> None:
        state = self._state
        if not isinstance(state, TestStarted | StepFinished):
            raise ProtocolViolationError("test_case_finished", state.name)
        envelope = Envelope(test_case_finished=finished)
        _forward(state.pretty, (envelope,))
        self._state = TestFinished(pretty=state.pretty, messages=state.messages + (envelope,))

    def spec_finished(self, *, commit: bool) -> None:
        """Commit the buffered spec envelopes (when ``commit``) and close live output."""
        state = self._state
        if commit and isinstance(state, BufferingState):
            self._run_log.append_many(state.messages)
        if isinstance(state, BufferingState | BeforeSpec) and state.pretty is not None:
            state.pretty.close()
        self._state = AfterSpec()

    def screenshot_captured(self, path: Path | str) -> bool:
        """Attach a screenshot to the open step; returns False when nothing was recorded."""
        if not isinstance(self._state, StepStarted):
            logger.debug("screenshot ignored in state %s", self._state.name)
            return False
        try:
            image = Path(path).read_bytes()
        except OSError as exc:
            logger.debug("screenshot %s could not be read: %s", path, exc)
            return False
        self.string_attachment_requested(screenshot_attachment_request(image))
        return True

    def string_attachment_requested(self, request: AttachmentRequest) -> None:
        state = self._state
        if not isinstance(state, StepStarted):
            raise ProtocolViolationError("string_attachment_requested", state.name)
        envelope = resolve_attachment(
            state.messages,
            state.test_case_started_id,
            state.test_step_started_id,
            request,
        )
        _forward(state.pretty, (envelope,))
        self._state = replace(state, messages=state.messages + (envelope,))

    def _roll_back_reloaded_test(
        self, state: StepStarted, received: tuple[Envelope, ...]
    ) -> ReceivedScenarioData:
        index = last_index_of(state.messages, "test_case_started")
        if index == -1:
            raise MissingReferenceError("Expected to find a testCaseStarted envelope")
        pretty: EnvelopeObserver | None = state.pretty
        if pretty is not None and self._open_channel is not None:
            pretty.close()
            self._echo("  Reloading..")
            self._echo("")
            pretty = self._open_channel()
            _forward(pretty, received)
        logger.debug(
            "discarded %d buffered envelope(s) of the reloaded spec", len(state.messages)
        )
        return ReceivedScenarioData(pretty=pretty, messages=received)


def _forward(pretty: EnvelopeObserver | None, envelopes: Sequence[Envelope]) -> None:
    if pretty is None:
        return
    for envelope in envelopes:
        pretty.on_envelope(envelope)
