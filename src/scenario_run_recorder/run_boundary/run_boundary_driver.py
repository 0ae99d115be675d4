"""Per-run setup and teardown around the lifecycle session."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from scenario_run_recorder.configuration import Configuration
from scenario_run_recorder.reports import write_rich_report, write_summary_report
from scenario_run_recorder.run_log import RunLogStore

from .run_metadata import (
    build_meta_envelope,
    build_test_run_finished_envelope,
    build_test_run_started_envelope,
)

logger = logging.getLogger(__name__)


class RunBoundaryDriver:
    """Writes the run header and footer and derives reports from the message log."""

    def __init__(
        self,
        configuration: Configuration,
        run_log: RunLogStore | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._configuration = configuration
        self._run_log = run_log or RunLogStore(configuration.messages.output)
        self._environ = environ

    @property
    def run_log(self) -> RunLogStore:
        return self._run_log

    def start_run(self) -> None:
        """Clear the previous log and write ``meta`` followed by ``testRunStarted``."""
        if not self._configuration.messages.enabled:
            logger.debug("messages disabled, no run header written")
            return
        self._run_log.reset()
        self._run_log.append_many(
            (build_meta_envelope(self._environ), build_test_run_started_envelope())
        )

    def finish_run(self, *, append_run_finished: bool = True) -> None:
        """Close the log and write every enabled derived report."""
        configuration = self._configuration
        if not (
            configuration.messages.enabled
            or configuration.json.enabled
            or configuration.html.enabled
        ):
            return
        if not self._run_log.exists():
            logger.debug("message log %s does not exist, no reports written", self._run_log.path)
            return
        if configuration.messages.enabled and append_run_finished:
            self._run_log.append(build_test_run_finished_envelope())
        self.render_reports()

    def render_reports(self) -> None:
        configuration = self._configuration
        if configuration.json.enabled:
            write_summary_report(self._run_log.read_all(), configuration.json.output)
            logger.debug("wrote summary report to %s", configuration.json.output)
        if configuration.html.enabled:
            write_rich_report(self._run_log.iter_lines(), configuration.html.output)
            logger.debug("wrote rich report to %s", configuration.html.output)
