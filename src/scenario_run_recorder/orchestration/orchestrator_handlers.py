"""Lifecycle handlers registered with the test orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

import click

from scenario_run_recorder.attachments import AttachmentRequest
from scenario_run_recorder.configuration import RunContext
from scenario_run_recorder.envelopes import (
    Envelope,
    TestCaseFinished,
    TestCaseStarted,
    TestStepFinished,
    TestStepStarted,
)
from scenario_run_recorder.lifecycle import LifecycleSession, OnAfterStep
from scenario_run_recorder.live_formatting import ChannelFactory, open_live_formatter_channel
from scenario_run_recorder.run_boundary import RunBoundaryDriver
from scenario_run_recorder.run_log import RunLogStore

from .orchestrator_contracts import ScreenshotDetails, SpecFile, SpecResults

logger = logging.getLogger(__name__)


class RecorderHandlers:  # pylint: disable=too-many-public-methods
    """Handler surface for one run.

    Every handler is a pass-through unless the run is a text-terminal
    (headless) run with at least one output enabled.
    """

    def __init__(
        self,
        context: RunContext,
        *,
        on_after_step: OnAfterStep | None = None,
        open_channel: ChannelFactory | None = None,
        environ: Mapping[str, str] | None = None,
        echo: Callable[[str], None] = click.echo,
    ) -> None:
        configuration = context.configuration
        self._context = context
        self._on_after_step = on_after_step
        self._echo = echo
        self._run_log = RunLogStore(configuration.messages.output)
        self._driver = RunBoundaryDriver(configuration, self._run_log, environ)
        channel_factory = None
        if configuration.pretty.enabled:
            channel_factory = open_channel or open_live_formatter_channel
        self._session = LifecycleSession(self._run_log, channel_factory, echo=echo)

    @property
    def session(self) -> LifecycleSession:
        return self._session

    @property
    def run_log(self) -> RunLogStore:
        return self._run_log

    def before_run(self) -> None:
        logger.debug("before_run_handler()")
        if not self._context.is_text_terminal:
            return
        self._driver.start_run()

    def after_run(self) -> None:
        logger.debug("after_run_handler()")
        if not self._context.is_text_terminal:
            return
        self._driver.finish_run()

    def before_spec(self, spec: SpecFile) -> None:
        logger.debug("before_spec_handler()")
        if not self._context.is_text_terminal or not spec.is_feature:
            return
        if not self._context.configuration.any_output_enabled:
            return
        self._session.spec_about_to_start()

    def after_spec(self, spec: SpecFile, results: SpecResults | None) -> None:
        """Commit the spec's envelopes unless a hook failure made them unrepresentable.

        ``results`` is None in interactive runs, in which case nothing is committed.
        """
        logger.debug("after_spec_handler()")
        if not self._context.is_text_terminal or not spec.is_feature:
            return
        commit = False
        if self._context.configuration.messages.enabled and results is not None:
            if results.remaining_tests_skipped:
                logger.info("hook failure in %s, discarding its messages", spec.relative)
                self._echo(
                    click.style(
                        "  Hook failures can't be represented in any reports "
                        f"(messages / json / html), thus none is created for {spec.relative}.",
                        fg="yellow",
                    )
                )
            else:
                commit = True
        self._session.spec_finished(commit=commit)

    def after_screenshot(self, details: ScreenshotDetails) -> ScreenshotDetails:
        logger.debug("after_screenshot_handler()")
        if self._records_messages():
            self._session.screenshot_captured(details.path)
        return details

    def spec_envelopes(self, envelopes: Sequence[Envelope]) -> bool:
        logger.debug("spec_envelopes_handler()")
        if self._is_recording():
            self._session.static_scenario_data_received(envelopes)
        return True

    def test_case_started(self, data: TestCaseStarted) -> bool:
        logger.debug("test_case_started_handler()")
        if self._is_recording():
            self._session.test_case_started(data)
        return True

    def test_step_started(self, data: TestStepStarted) -> bool:
        logger.debug("test_step_started_handler()")
        if self._is_recording():
            self._session.test_step_started(data)
        return True

    def test_step_finished(self, data: TestStepFinished) -> bool:
        logger.debug("test_step_finished_handler()")
        if self._is_recording():
            self._session.test_step_finished(data, self._on_after_step)
        return True

    def test_case_finished(self, data: TestCaseFinished) -> bool:
        logger.debug("test_case_finished_handler()")
        if self._is_recording():
            self._session.test_case_finished(data)
        return True

    def create_string_attachment(self, request: AttachmentRequest) -> bool:
        logger.debug("create_string_attachment_handler()")
        if self._records_messages():
            self._session.string_attachment_requested(request)
        return True

    def _is_recording(self) -> bool:
        return self._context.is_text_terminal and self._context.configuration.any_output_enabled

    def _records_messages(self) -> bool:
        return self._context.is_text_terminal and self._context.configuration.messages.enabled
