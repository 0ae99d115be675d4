"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_MESSAGES_OUTPUT = "cucumber-messages.ndjson"
DEFAULT_JSON_OUTPUT = "cucumber-report.json"
DEFAULT_HTML_OUTPUT = "cucumber-report.html"


@dataclass(frozen=True)
class OutputSettings:
    """Enablement and resolved destination of one run artifact."""

    enabled: bool
    output: Path


@dataclass(frozen=True)
class PrettySettings:
    """Live terminal rendering while specs execute."""

    enabled: bool


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate.

    ``messages.enabled`` is the effective value: the message log is always
    written when a report derived from it is enabled.
    """

    path: Path | None
    project_root: Path
    messages: OutputSettings
    json: OutputSettings
    html: OutputSettings
    pretty: PrettySettings

    @property
    def any_output_enabled(self) -> bool:
        return self.messages.enabled or self.pretty.enabled


@dataclass(frozen=True)
class RunContext:
    """Per-run facts supplied by the orchestrator."""

    configuration: Configuration
    is_text_terminal: bool
