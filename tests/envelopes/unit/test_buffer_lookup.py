"""Envelope history lookup tests."""

from __future__ import annotations

import pytest
from scenario_run_recorder.envelopes import (
    Envelope,
    MissingReferenceError,
    TestCase,
    TestStep,
    find_open_test_step,
    last_index_of,
)


def test_last_index_of_returns_latest_position(scenario_data, events) -> None:
    history = scenario_data() + (
        Envelope(test_case_started=events.test_case_started("tcs-1")),
        Envelope(test_case_finished=events.test_case_finished("tcs-1")),
        Envelope(test_case_started=events.test_case_started("tcs-2")),
    )

    assert last_index_of(history, "test_case_started") == len(history) - 1
    assert last_index_of(history, "attachment") == -1


def test_resolves_open_step_through_its_test_case(scenario_data, events) -> None:
    history = scenario_data() + (Envelope(test_case_started=events.test_case_started()),)

    started, test_case, test_step = find_open_test_step(history, "tcs-1", "ts-2")

    assert started.id == "tcs-1"
    assert test_case.id == "tc-1"
    assert test_step.pickle_step_id == "ps-2"


def test_most_recent_test_case_with_an_id_wins(scenario_data, events) -> None:
    replacement = TestCase(
        id="tc-1",
        pickle_id="pickle-1",
        test_steps=[TestStep(id="ts-new", pickle_step_id="ps-1")],
    )
    history = scenario_data() + (
        Envelope(test_case=replacement),
        Envelope(test_case_started=events.test_case_started()),
    )

    _, test_case, _ = find_open_test_step(history, "tcs-1", "ts-new")

    assert test_case is replacement


@pytest.mark.parametrize(
    ("test_case_started_id", "test_step_id", "message"),
    [
        ("tcs-unknown", "ts-1", "testCaseStarted with id tcs-unknown"),
        ("tcs-1", "ts-unknown", "testStep with id ts-unknown"),
    ],
)
def test_unresolvable_references_raise(
    scenario_data, events, test_case_started_id: str, test_step_id: str, message: str
) -> None:
    history = scenario_data() + (Envelope(test_case_started=events.test_case_started()),)

    with pytest.raises(MissingReferenceError, match=message):
        find_open_test_step(history, test_case_started_id, test_step_id)


def test_test_case_started_for_unknown_test_case_raises(scenario_data, events) -> None:
    history = scenario_data() + (
        Envelope(test_case_started=events.test_case_started("tcs-1", "tc-unknown")),
    )

    with pytest.raises(MissingReferenceError, match="testCase with id tc-unknown"):
        find_open_test_step(history, "tcs-1", "ts-1")


@pytest.mark.parametrize(
    "test_step",
    [
        TestStep(id="ts-x"),
        TestStep(id="ts-x", pickle_step_id="ps-1", hook_id="hook-1"),
    ],
)
def test_step_must_reference_exactly_one_target(events, test_step: TestStep) -> None:
    history = (
        Envelope(test_case=TestCase(id="tc-1", pickle_id="pickle-1", test_steps=[test_step])),
        Envelope(test_case_started=events.test_case_started()),
    )

    with pytest.raises(MissingReferenceError, match="exactly one of a pickleStep or a hook"):
        find_open_test_step(history, "tcs-1", "ts-x")
