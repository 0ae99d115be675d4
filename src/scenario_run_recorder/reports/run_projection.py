"""Projection of an ordered envelope sequence into features, scenarios and steps."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from scenario_run_recorder.envelopes import (
    Attachment,
    DocumentIndex,
    Envelope,
    GherkinDocument,
    Hook,
    Meta,
    Pickle,
    PickleStep,
    TestCase,
    TestCaseStarted,
    TestStep,
    TestStepResult,
    TestStepResultStatus,
    Timestamp,
)

# Most severe first.
STATUS_SEVERITY = (
    TestStepResultStatus.failed,
    TestStepResultStatus.ambiguous,
    TestStepResultStatus.undefined,
    TestStepResultStatus.pending,
    TestStepResultStatus.skipped,
    TestStepResultStatus.unknown,
    TestStepResultStatus.passed,
)


@dataclass
class StepRecord:
    test_step: TestStep
    pickle_step: PickleStep | None
    hook: Hook | None
    result: TestStepResult | None = None
    attachments: list[Attachment] = field(default_factory=list)

    @property
    def is_hook(self) -> bool:
        return self.test_step.hook_id is not None


@dataclass
class ScenarioRecord:
    test_case_started: TestCaseStarted
    pickle: Pickle
    steps: list[StepRecord]
    finished: bool = False
    will_be_retried: bool = False

    @property
    def status(self) -> TestStepResultStatus:
        statuses = {step.result.status for step in self.steps if step.result is not None}
        if not statuses:
            return TestStepResultStatus.unknown
        return next(status for status in STATUS_SEVERITY if status in statuses)


@dataclass
class FeatureRecord:
    document: GherkinDocument
    index: DocumentIndex
    scenarios: list[ScenarioRecord] = field(default_factory=list)


@dataclass
class RunProjection:
    meta: Meta | None = None
    started: Timestamp | None = None
    finished: Timestamp | None = None
    features: list[FeatureRecord] = field(default_factory=list)

    def reported_scenarios(self) -> list[tuple[FeatureRecord, ScenarioRecord]]:
        """Scenarios of the final attempt of every test case, in execution order."""
        return [
            (feature, scenario)
            for feature in self.features
            for scenario in feature.scenarios
            if not scenario.will_be_retried
        ]


def project_run(envelopes: Iterable[Envelope]) -> RunProjection:
    """Fold an ordered envelope sequence into a report-friendly structure."""
    projection = RunProjection()
    features: dict[str, FeatureRecord] = {}
    pickles: dict[str, Pickle] = {}
    hooks: dict[str, Hook] = {}
    test_cases: dict[str, TestCase] = {}
    scenarios: dict[str, ScenarioRecord] = {}

    for envelope in envelopes:
        if envelope.meta is not None:
            projection.meta = envelope.meta
        elif envelope.test_run_started is not None:
            projection.started = envelope.test_run_started.timestamp
        elif envelope.test_run_finished is not None:
            projection.finished = envelope.test_run_finished.timestamp
        elif envelope.gherkin_document is not None:
            document = envelope.gherkin_document
            index = DocumentIndex(document)
            existing = features.get(index.uri)
            if existing is None:
                features[index.uri] = FeatureRecord(document, index)
            else:
                existing.document = document
                existing.index = index
        elif envelope.pickle is not None:
            pickles[envelope.pickle.id] = envelope.pickle
        elif envelope.hook is not None:
            hooks[envelope.hook.id] = envelope.hook
        elif envelope.test_case is not None:
            test_cases[envelope.test_case.id] = envelope.test_case
        elif envelope.test_case_started is not None:
            scenario = _start_scenario(envelope.test_case_started, test_cases, pickles, hooks)
            feature = features.get(scenario.pickle.uri) if scenario is not None else None
            if scenario is not None and feature is not None:
                scenarios[envelope.test_case_started.id] = scenario
                feature.scenarios.append(scenario)
        elif envelope.test_step_finished is not None:
            finished = envelope.test_step_finished
            step = _find_step(scenarios, finished.test_case_started_id, finished.test_step_id)
            if step is not None:
                step.result = finished.test_step_result
        elif envelope.attachment is not None:
            attachment = envelope.attachment
            step = _find_step(scenarios, attachment.test_case_started_id, attachment.test_step_id)
            if step is not None:
                step.attachments.append(attachment)
        elif envelope.test_case_finished is not None:
            scenario = scenarios.get(envelope.test_case_finished.test_case_started_id)
            if scenario is not None:
                scenario.finished = True
                scenario.will_be_retried = envelope.test_case_finished.will_be_retried

    projection.features = [feature for feature in features.values() if feature.scenarios]
    return projection


def _start_scenario(
    started: TestCaseStarted,
    test_cases: dict[str, TestCase],
    pickles: dict[str, Pickle],
    hooks: dict[str, Hook],
) -> ScenarioRecord | None:
    test_case = test_cases.get(started.test_case_id)
    if test_case is None:
        return None
    pickle = pickles.get(test_case.pickle_id)
    if pickle is None:
        return None
    pickle_steps = {step.id: step for step in pickle.steps}
    steps = [
        StepRecord(
            test_step=test_step,
            pickle_step=pickle_steps.get(test_step.pickle_step_id or ""),
            hook=hooks.get(test_step.hook_id or ""),
        )
        for test_step in test_case.test_steps
    ]
    return ScenarioRecord(test_case_started=started, pickle=pickle, steps=steps)


def _find_step(
    scenarios: dict[str, ScenarioRecord],
    test_case_started_id: str | None,
    test_step_id: str | None,
) -> StepRecord | None:
    scenario = scenarios.get(test_case_started_id or "")
    if scenario is None:
        return None
    return next((step for step in scenario.steps if step.test_step.id == test_step_id), None)
