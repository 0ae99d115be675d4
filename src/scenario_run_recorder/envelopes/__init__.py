"""Envelope domain exports."""

from .buffer_lookup import MissingReferenceError, find_open_test_step, last_index_of
from .document_index import AstNode, DocumentIndex
from .envelope_models import (
    Attachment,
    AttachmentContentEncoding,
    Background,
    Ci,
    Duration,
    Envelope,
    Examples,
    Feature,
    FeatureChild,
    GherkinDocument,
    Git,
    Hook,
    Location,
    Meta,
    Pickle,
    PickleStep,
    PickleTag,
    Product,
    Rule,
    RuleChild,
    Scenario,
    Source,
    SourceMediaType,
    SourceReference,
    Step,
    TableRow,
    Tag,
    TestCase,
    TestCaseFinished,
    TestCaseStarted,
    TestRunFinished,
    TestRunStarted,
    TestStep,
    TestStepFinished,
    TestStepResult,
    TestStepResultStatus,
    TestStepStarted,
    Timestamp,
    duration_to_nanos,
    timestamp_now,
)
from .ndjson_codec import (
    EnvelopeDecodeError,
    envelope_from_dict,
    envelope_to_dict,
    iter_envelopes,
    parse_envelope_line,
    serialize_envelope,
)

__all__ = [
    "AstNode",
    "Attachment",
    "AttachmentContentEncoding",
    "Background",
    "Ci",
    "DocumentIndex",
    "Duration",
    "Envelope",
    "EnvelopeDecodeError",
    "Examples",
    "Feature",
    "FeatureChild",
    "GherkinDocument",
    "Git",
    "Hook",
    "Location",
    "Meta",
    "MissingReferenceError",
    "Pickle",
    "PickleStep",
    "PickleTag",
    "Product",
    "Rule",
    "RuleChild",
    "Scenario",
    "Source",
    "SourceMediaType",
    "SourceReference",
    "Step",
    "TableRow",
    "Tag",
    "TestCase",
    "TestCaseFinished",
    "TestCaseStarted",
    "TestRunFinished",
    "TestRunStarted",
    "TestStep",
    "TestStepFinished",
    "TestStepResult",
    "TestStepResultStatus",
    "TestStepStarted",
    "Timestamp",
    "duration_to_nanos",
    "envelope_from_dict",
    "envelope_to_dict",
    "find_open_test_step",
    "iter_envelopes",
    "last_index_of",
    "parse_envelope_line",
    "serialize_envelope",
    "timestamp_now",
]
