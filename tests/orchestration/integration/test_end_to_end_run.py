"""Whole-run recording integration tests."""

from __future__ import annotations

import json
from pathlib import Path

from scenario_run_recorder.configuration import RunContext, build_configuration
from scenario_run_recorder.lifecycle import StepHookParameter
from scenario_run_recorder.live_formatting import open_live_formatter_channel
from scenario_run_recorder.orchestration import RecorderHandlers, SpecFile, SpecResults

_SPEC = SpecFile(name="login.feature", relative="cypress/e2e/login.feature")


def _run_single_spec(handlers: RecorderHandlers, scenario_data, events) -> None:
    handlers.before_run()
    handlers.before_spec(_SPEC)
    handlers.spec_envelopes(scenario_data())
    handlers.test_case_started(events.test_case_started())
    for step_id in ("ts-1", "ts-2"):
        handlers.test_step_started(events.test_step_started(step_id))
        handlers.test_step_finished(events.test_step_finished(step_id))
    handlers.test_case_finished(events.test_case_finished())
    handlers.after_spec(_SPEC, SpecResults())
    handlers.after_run()


def test_records_whole_run_in_order(tmp_path: Path, scenario_data, events) -> None:
    configuration = build_configuration(
        {"messages": {"enabled": True}, "json": {"enabled": True}}, project_root=tmp_path
    )
    handlers = RecorderHandlers(
        RunContext(configuration=configuration, is_text_terminal=True), environ={}
    )

    _run_single_spec(handlers, scenario_data, events)

    kinds = [envelope.kind for envelope in handlers.run_log.read_all()]
    assert kinds == [
        "meta",
        "test_run_started",
        "gherkin_document",
        "pickle",
        "test_case",
        "test_case_started",
        "test_step_started",
        "test_step_finished",
        "test_step_started",
        "test_step_finished",
        "test_case_finished",
        "test_run_finished",
    ]
    report = json.loads(configuration.json.output.read_text(encoding="utf-8"))
    statuses = [step["result"]["status"] for step in report[0]["elements"][0]["steps"]]
    assert statuses == ["passed", "passed"]


def test_pretty_only_run_prints_progress_without_log(
    tmp_path: Path, scenario_data, events
) -> None:
    configuration = build_configuration({"pretty": {"enabled": True}}, project_root=tmp_path)
    echoed: list[str] = []

    def attach_note(parameter: StepHookParameter) -> None:
        parameter.attach(f"checked {parameter.pickle_step.text}")

    handlers = RecorderHandlers(
        RunContext(configuration=configuration, is_text_terminal=True),
        on_after_step=attach_note,
        open_channel=lambda: open_live_formatter_channel(colors=False, echo=echoed.append),
        environ={},
        echo=echoed.append,
    )

    _run_single_spec(handlers, scenario_data, events)

    assert not handlers.run_log.exists()
    assert "    Scenario: Successful login # features/login.feature:3" in echoed
    assert "        checked a registered user" in echoed
    assert echoed.index("      ✔ Given a registered user") < echoed.index(
        "        checked a registered user"
    )

