"""Cross-reference lookups over an in-memory envelope history.

Every lookup scans from the end of the history so that the most recently
received object with a given id wins.
"""

from __future__ import annotations

from collections.abc import Sequence

from .envelope_models import (
    Envelope,
    GherkinDocument,
    Pickle,
    PickleStep,
    TestCase,
    TestCaseStarted,
    TestStep,
)


class MissingReferenceError(Exception):
    """Raised when a referenced object is absent from the envelope history."""


def last_index_of(envelopes: Sequence[Envelope], kind: str) -> int:
    """Return the index of the last envelope of ``kind``, or -1."""
    for index in range(len(envelopes) - 1, -1, -1):
        if envelopes[index].kind == kind:
            return index
    return -1


def find_test_case_started(
    envelopes: Sequence[Envelope], test_case_started_id: str
) -> TestCaseStarted:
    for envelope in reversed(envelopes):
        started = envelope.test_case_started
        if started is not None and started.id == test_case_started_id:
            return started
    raise MissingReferenceError(
        f"Expected to find a testCaseStarted with id {test_case_started_id}"
    )


def find_test_case(envelopes: Sequence[Envelope], test_case_id: str) -> TestCase:
    for envelope in reversed(envelopes):
        test_case = envelope.test_case
        if test_case is not None and test_case.id == test_case_id:
            return test_case
    raise MissingReferenceError(f"Expected to find a testCase with id {test_case_id}")


def find_test_step(test_case: TestCase, test_step_id: str) -> TestStep:
    for test_step in test_case.test_steps:
        if test_step.id == test_step_id:
            return test_step
    raise MissingReferenceError(
        f"Expected to find a testStep with id {test_step_id} in testCase {test_case.id}"
    )


def find_pickle(envelopes: Sequence[Envelope], pickle_id: str) -> Pickle:
    for envelope in reversed(envelopes):
        pickle = envelope.pickle
        if pickle is not None and pickle.id == pickle_id:
            return pickle
    raise MissingReferenceError(f"Expected to find a pickle with id {pickle_id}")


def find_pickle_step(pickle: Pickle, pickle_step_id: str) -> PickleStep:
    for step in pickle.steps:
        if step.id == pickle_step_id:
            return step
    raise MissingReferenceError(
        f"Expected to find a pickleStep with id {pickle_step_id} in pickle {pickle.id}"
    )


def find_gherkin_document(envelopes: Sequence[Envelope], uri: str) -> GherkinDocument:
    for envelope in reversed(envelopes):
        document = envelope.gherkin_document
        if document is not None and document.uri == uri:
            return document
    raise MissingReferenceError(f"Expected to find a gherkinDocument with uri {uri}")


def find_open_test_step(
    envelopes: Sequence[Envelope], test_case_started_id: str, test_step_id: str
) -> tuple[TestCaseStarted, TestCase, TestStep]:
    """Resolve a (testCaseStarted, testStep) pair to the objects it refers to."""
    started = find_test_case_started(envelopes, test_case_started_id)
    test_case = find_test_case(envelopes, started.test_case_id)
    test_step = find_test_step(test_case, test_step_id)
    if (test_step.pickle_step_id is None) == (test_step.hook_id is None):
        raise MissingReferenceError(
            f"Expected testStep {test_step_id} to reference exactly one of a pickleStep or a hook"
        )
    return started, test_case, test_step
