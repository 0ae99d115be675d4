"""Human-readable progress rendering of an envelope stream."""

from __future__ import annotations

from collections.abc import Callable

import click

from scenario_run_recorder.envelopes import (
    Attachment,
    AttachmentContentEncoding,
    Envelope,
    Pickle,
    TestCase,
    TestCaseStarted,
    TestStepFinished,
    TestStepResultStatus,
)
from scenario_run_recorder.envelopes.document_index import DocumentIndex

_STATUS_STYLES: dict[TestStepResultStatus, tuple[str, str]] = {
    TestStepResultStatus.passed: ("✔", "green"),
    TestStepResultStatus.failed: ("✘", "red"),
    TestStepResultStatus.skipped: ("↷", "cyan"),
    TestStepResultStatus.pending: ("?", "yellow"),
    TestStepResultStatus.undefined: ("?", "yellow"),
    TestStepResultStatus.ambiguous: ("✘", "red"),
    TestStepResultStatus.unknown: ("?", "yellow"),
}


class PrettyFormatter:
    """Consumes envelopes one at a time and emits formatted text chunks immediately."""

    def __init__(self, colors: bool, on_chunk: Callable[[str], None]) -> None:
        self._colors = colors
        self._on_chunk = on_chunk
        self._documents: dict[str, DocumentIndex] = {}
        self._pickles: dict[str, Pickle] = {}
        self._test_cases: dict[str, TestCase] = {}
        self._test_cases_started: dict[str, TestCaseStarted] = {}
        self._announced_features: set[str] = set()

    def on_envelope(self, envelope: Envelope) -> None:
        if envelope.gherkin_document is not None:
            index = DocumentIndex(envelope.gherkin_document)
            self._documents[index.uri] = index
        elif envelope.pickle is not None:
            self._pickles[envelope.pickle.id] = envelope.pickle
        elif envelope.test_case is not None:
            self._test_cases[envelope.test_case.id] = envelope.test_case
        elif envelope.test_case_started is not None:
            self._test_cases_started[envelope.test_case_started.id] = envelope.test_case_started
            self._render_test_case_started(envelope.test_case_started)
        elif envelope.test_step_finished is not None:
            self._render_test_step_finished(envelope.test_step_finished)
        elif envelope.attachment is not None:
            self._render_attachment(envelope.attachment)
        elif envelope.test_case_finished is not None:
            self._emit("")

    def _render_test_case_started(self, started: TestCaseStarted) -> None:
        pickle = self._pickle_for(started.id)
        if pickle is None:
            return
        document = self._documents.get(pickle.uri)
        if pickle.uri not in self._announced_features and document is not None:
            self._announced_features.add(pickle.uri)
            self._emit(f"{document.feature_keyword}: {document.feature_name}")
            self._emit("")
        tags = " ".join(tag.name for tag in pickle.tags)
        if tags:
            self._emit("  " + self._style(tags, "cyan"))
        keyword = "Scenario"
        location = pickle.uri
        if document is not None:
            node = document.first_node(pickle.ast_node_ids)
            if node is not None:
                keyword = node.keyword or keyword
                if node.line is not None:
                    location = f"{pickle.uri}:{node.line}"
        comment = self._style(f"# {location}", "bright_black")
        self._emit(f"  {keyword}: {pickle.name} {comment}")

    def _render_test_step_finished(self, finished: TestStepFinished) -> None:
        pickle = self._pickle_for(finished.test_case_started_id)
        test_case = self._test_case_for(finished.test_case_started_id)
        if pickle is None or test_case is None:
            return
        test_step = next(
            (step for step in test_case.test_steps if step.id == finished.test_step_id), None
        )
        if test_step is None:
            return
        result = finished.test_step_result
        symbol, color = _STATUS_STYLES[result.status]
        if test_step.pickle_step_id is not None:
            pickle_step = next(
                (step for step in pickle.steps if step.id == test_step.pickle_step_id), None
            )
            if pickle_step is None:
                return
            keyword = ""
            document = self._documents.get(pickle.uri)
            if document is not None:
                node = document.first_node(pickle_step.ast_node_ids)
                if node is not None:
                    keyword = node.keyword
            self._emit("    " + self._style(f"{symbol} {keyword}{pickle_step.text}", color))
        elif result.status is not TestStepResultStatus.failed:
            return
        else:
            self._emit("    " + self._style(f"{symbol} Hook", color))
        if result.message:
            for line in result.message.splitlines():
                self._emit("        " + self._style(line, color))

    def _render_attachment(self, attachment: Attachment) -> None:
        if attachment.content_encoding is AttachmentContentEncoding.identity:
            for line in attachment.body.splitlines():
                self._emit(f"      {line}")
        else:
            self._emit(f"      Embedding ({attachment.media_type})")

    def _pickle_for(self, test_case_started_id: str) -> Pickle | None:
        test_case = self._test_case_for(test_case_started_id)
        if test_case is None:
            return None
        return self._pickles.get(test_case.pickle_id)

    def _test_case_for(self, test_case_started_id: str) -> TestCase | None:
        started = self._test_cases_started.get(test_case_started_id)
        if started is None:
            return None
        return self._test_cases.get(started.test_case_id)

    def _style(self, text: str, color: str) -> str:
        if not self._colors:
            return text
        return click.style(text, fg=color)

    def _emit(self, line: str) -> None:
        self._on_chunk(line + "\n")
