"""Orchestrator integration exports."""

from .event_replay import ReplayError, replay_event_file, replay_events
from .orchestrator_contracts import (
    HOOK_FAILURE_EXPR,
    ScreenshotDetails,
    SpecFile,
    SpecResults,
    SpecTestOutcome,
)
from .orchestrator_handlers import RecorderHandlers

__all__ = [
    "HOOK_FAILURE_EXPR",
    "RecorderHandlers",
    "ReplayError",
    "ScreenshotDetails",
    "SpecFile",
    "SpecResults",
    "SpecTestOutcome",
    "replay_event_file",
    "replay_events",
]
