"""Lifecycle domain exports."""

from .lifecycle_errors import ProtocolViolationError
from .lifecycle_session import LifecycleSession
from .spec_states import (
    AfterSpec,
    BeforeSpec,
    Initial,
    ReceivedScenarioData,
    SpecRunState,
    StepFinished,
    StepStarted,
    TestFinished,
    TestStarted,
)
from .step_resolution import OnAfterStep, ResolvedScenarioStep, StepHookParameter

__all__ = [
    "AfterSpec",
    "BeforeSpec",
    "Initial",
    "LifecycleSession",
    "OnAfterStep",
    "ProtocolViolationError",
    "ReceivedScenarioData",
    "ResolvedScenarioStep",
    "SpecRunState",
    "StepFinished",
    "StepHookParameter",
    "StepStarted",
    "TestFinished",
    "TestStarted",
]
