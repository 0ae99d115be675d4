"""Resolution of a finished test step to the scenario objects it executed."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from scenario_run_recorder.attachments import AttachmentRequest, build_attachment_request
from scenario_run_recorder.envelopes import (
    Envelope,
    GherkinDocument,
    Pickle,
    PickleStep,
    TestStepResult,
    find_open_test_step,
)
from scenario_run_recorder.envelopes.buffer_lookup import (
    find_gherkin_document,
    find_pickle,
    find_pickle_step,
)


@dataclass(frozen=True)
class ResolvedScenarioStep:
    """The document, pickle and pickle step a scenario test step executed."""

    gherkin_document: GherkinDocument
    pickle: Pickle
    pickle_step: PickleStep


def resolve_scenario_step(
    envelopes: Sequence[Envelope], test_case_started_id: str, test_step_id: str
) -> ResolvedScenarioStep | None:
    """Resolve a test step; returns None for hook steps.

    Raises:
      MissingReferenceError: If any referenced object is absent.
    """
    _, test_case, test_step = find_open_test_step(envelopes, test_case_started_id, test_step_id)
    if test_step.pickle_step_id is None:
        return None
    pickle = find_pickle(envelopes, test_case.pickle_id)
    pickle_step = find_pickle_step(pickle, test_step.pickle_step_id)
    gherkin_document = find_gherkin_document(envelopes, pickle.uri)
    return ResolvedScenarioStep(
        gherkin_document=gherkin_document,
        pickle=pickle,
        pickle_step=pickle_step,
    )


@dataclass
class StepHookParameter:  # pylint: disable=too-many-instance-attributes
    """Argument handed to the step-completion callback."""

    gherkin_document: GherkinDocument
    pickle: Pickle
    pickle_step: PickleStep
    test_case_started_id: str
    test_step_id: str
    result: TestStepResult
    attachments: list[AttachmentRequest] = field(default_factory=list)

    def attach(self, data: str | bytes, media_type: str | None = None) -> None:
        """Queue an attachment for the step that just finished."""
        self.attachments.append(build_attachment_request(data, media_type))


OnAfterStep = Callable[[StepHookParameter], None]
