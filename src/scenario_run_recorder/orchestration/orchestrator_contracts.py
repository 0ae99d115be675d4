"""Entities handed over by the test orchestrator."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

FEATURE_SUFFIX = ".feature"

# Emitted by the orchestrator when a failing fixture hook skips the rest of a spec.
HOOK_FAILURE_EXPR = re.compile(
    r"Because this error occurred during a `[^`]+` hook "
    r"we are skipping all of the remaining tests\."
)


@dataclass(frozen=True)
class SpecFile:
    """A spec file scheduled by the orchestrator."""

    name: str
    relative: str

    @property
    def is_feature(self) -> bool:
        return self.name.endswith(FEATURE_SUFFIX)


@dataclass(frozen=True)
class SpecTestOutcome:
    """Orchestrator-level outcome of one test of a spec."""

    title: str
    display_error: str | None = None


@dataclass(frozen=True)
class SpecResults:
    """Orchestrator-level outcome of a finished spec."""

    tests: tuple[SpecTestOutcome, ...] = ()

    @property
    def remaining_tests_skipped(self) -> bool:
        """True when a hook failure skipped tests in a way no report can represent."""
        return any(
            test.display_error is not None and HOOK_FAILURE_EXPR.search(test.display_error)
            for test in self.tests
        )


@dataclass(frozen=True)
class ScreenshotDetails:
    """Screenshot taken by the orchestrator; returned unchanged to it."""

    path: Path
    name: str | None = None
