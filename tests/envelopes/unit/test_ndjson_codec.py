"""NDJSON envelope codec tests."""

from __future__ import annotations

import json

import pytest
from scenario_run_recorder.envelopes import (
    Attachment,
    AttachmentContentEncoding,
    Ci,
    Duration,
    Envelope,
    EnvelopeDecodeError,
    Git,
    Meta,
    Product,
    TestRunFinished,
    TestStepFinished,
    TestStepResult,
    TestStepResultStatus,
    Timestamp,
    iter_envelopes,
    parse_envelope_line,
    serialize_envelope,
)


def _meta_envelope() -> Envelope:
    return Envelope(
        meta=Meta(
            protocol_version="24.0.1",
            implementation=Product(name="scenario-run-recorder", version="0.1.0"),
            runtime=Product(name="python", version="3.11.9"),
            os=Product(name="linux", version="6.1"),
            cpu=Product(name="x86_64"),
            ci=Ci(
                name="GitHub Actions",
                url="https://github.com/acme/shop/actions/runs/7",
                build_number="7",
                git=Git(remote="https://github.com/acme/shop.git", revision="abc123"),
            ),
        )
    )


def test_serializes_envelope_as_single_camel_case_line() -> None:
    envelope = Envelope(
        attachment=Attachment(
            test_case_started_id="tcs-1",
            test_step_id="ts-1",
            body="hello\nworld",
            media_type="text/plain",
            content_encoding=AttachmentContentEncoding.identity,
        )
    )

    line = serialize_envelope(envelope)

    assert "\n" not in line
    assert json.loads(line) == {
        "attachment": {
            "testCaseStartedId": "tcs-1",
            "testStepId": "ts-1",
            "body": "hello\nworld",
            "mediaType": "text/plain",
            "contentEncoding": "IDENTITY",
        }
    }


def test_serialization_omits_absent_optional_fields() -> None:
    envelope = Envelope(
        test_step_finished=TestStepFinished(
            test_case_started_id="tcs-1",
            test_step_id="ts-1",
            test_step_result=TestStepResult(
                status=TestStepResultStatus.passed,
                duration=Duration(seconds=0, nanos=10),
            ),
            timestamp=Timestamp(seconds=5, nanos=1),
        )
    )

    record = json.loads(serialize_envelope(envelope))

    assert record["testStepFinished"]["testStepResult"] == {
        "status": "PASSED",
        "duration": {"seconds": 0, "nanos": 10},
    }


def test_run_finished_is_written_without_success_flag() -> None:
    envelope = Envelope(test_run_finished=TestRunFinished(timestamp=Timestamp(seconds=9, nanos=0)))

    assert json.loads(serialize_envelope(envelope)) == {
        "testRunFinished": {"timestamp": {"seconds": 9, "nanos": 0}}
    }


def test_run_finished_from_other_producers_ignores_success_flag() -> None:
    line = '{"testRunFinished":{"success":true,"timestamp":{"seconds":9,"nanos":0}}}'

    envelope = parse_envelope_line(line)

    assert envelope.test_run_finished == TestRunFinished(timestamp=Timestamp(seconds=9, nanos=0))


def test_decodes_enum_values_into_protocol_enums() -> None:
    line = (
        '{"testStepFinished":{"testCaseStartedId":"tcs-1","testStepId":"ts-1",'
        '"testStepResult":{"status":"FAILED","duration":{"seconds":0,"nanos":5},'
        '"message":"boom"},"timestamp":{"seconds":5,"nanos":1}}}'
    )

    finished = parse_envelope_line(line).test_step_finished

    assert finished is not None
    assert finished.test_step_result.status is TestStepResultStatus.failed
    assert finished.test_step_result.duration == Duration(seconds=0, nanos=5)


def test_meta_envelope_survives_a_write_and_read() -> None:
    envelope = _meta_envelope()

    assert parse_envelope_line(serialize_envelope(envelope)) == envelope


def test_scenario_data_survives_a_write_and_read(scenario_data) -> None:
    envelopes = scenario_data(with_hook=True)
    lines = [serialize_envelope(envelope) + "\n" for envelope in envelopes]

    assert tuple(iter_envelopes(lines)) == envelopes


def test_iter_envelopes_skips_blank_lines() -> None:
    line = serialize_envelope(_meta_envelope())

    parsed = list(iter_envelopes(["", line, "   \n", line + "\n"]))

    assert [envelope.kind for envelope in parsed] == ["meta", "meta"]


@pytest.mark.parametrize(
    ("line", "message"),
    [
        ("not json", "Invalid envelope record"),
        ("[]", "exactly one key"),
        ('{"a": {}, "b": {}}', "exactly one key"),
        ('{"somethingElse": {}}', "Unknown envelope type: somethingElse"),
        ('{"testRunStarted": 5}', "testRunStarted must be an object"),
        ('{"testRunStarted": {}}', "Malformed testRunStarted envelope"),
        (
            '{"attachment": {"body": "x", "mediaType": "text/plain", "contentEncoding": "GZIP"}}',
            "Malformed attachment envelope",
        ),
    ],
)
def test_rejects_malformed_records(line: str, message: str) -> None:
    with pytest.raises(EnvelopeDecodeError, match=message):
        parse_envelope_line(line)
