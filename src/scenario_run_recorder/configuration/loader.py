"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_HTML_OUTPUT,
    DEFAULT_JSON_OUTPUT,
    DEFAULT_MESSAGES_OUTPUT,
    Configuration,
    OutputSettings,
    PrettySettings,
)

_KNOWN_SECTIONS = frozenset({"messages", "json", "html", "pretty"})


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str, project_root: Path | str | None = None
) -> Configuration:
    """Load and validate the configuration file.

    Relative output paths resolve against ``project_root``, which defaults to
    the directory holding the configuration file.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    root = Path(project_root) if project_root is not None else path.resolve().parent
    return build_configuration(parsed, project_root=root, path=path)


def build_configuration(
    parsed: Any, *, project_root: Path, path: Path | None = None
) -> Configuration:
    """Validate an already-parsed configuration mapping."""
    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    unknown = sorted(str(key) for key in parsed if key not in _KNOWN_SECTIONS)
    if unknown:
        raise ConfigurationError(f"Unknown configuration section(s): {', '.join(unknown)}")

    messages = _parse_output_section(
        parsed.get("messages"), "messages", DEFAULT_MESSAGES_OUTPUT, project_root
    )
    json_report = _parse_output_section(
        parsed.get("json"), "json", DEFAULT_JSON_OUTPUT, project_root
    )
    html_report = _parse_output_section(
        parsed.get("html"), "html", DEFAULT_HTML_OUTPUT, project_root
    )
    pretty = _parse_pretty_section(parsed.get("pretty"))

    if json_report.enabled or html_report.enabled:
        messages = OutputSettings(enabled=True, output=messages.output)

    return Configuration(
        path=path,
        project_root=project_root,
        messages=messages,
        json=json_report,
        html=html_report,
        pretty=pretty,
    )


def _parse_output_section(
    value: Any, section_name: str, default_output: str, project_root: Path
) -> OutputSettings:
    section = _optional_mapping(value, section_name)
    enabled = _optional_bool(section.get("enabled"), f"{section_name}.enabled")
    output_raw = section.get("output", default_output)
    output = _require_non_empty_string(output_raw, f"{section_name}.output")
    return OutputSettings(enabled=enabled, output=_resolve_path(project_root, output))


def _parse_pretty_section(value: Any) -> PrettySettings:
    section = _optional_mapping(value, "pretty")
    return PrettySettings(enabled=_optional_bool(section.get("enabled"), "pretty.enabled"))


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _optional_bool(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped
