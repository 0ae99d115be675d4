"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "recorder.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Report configuration template for scenario-run-recorder.
# Every section is optional; outputs are disabled unless enabled below.
# Relative output paths resolve against the directory of this file.

messages:
  # Append-only NDJSON log of every envelope recorded during the run.
  enabled: true
  output: "cucumber-messages.ndjson"

json:
  # Summary report derived from the message log (implies messages).
  enabled: false
  output: "cucumber-report.json"

html:
  # Browsable report derived from the message log (implies messages).
  enabled: false
  output: "cucumber-report.html"

pretty:
  # Live progress rendering in the terminal while specs execute.
  enabled: false
"""


def build_placeholder_configuration() -> str:
    """Build a YAML report configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the report configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Report configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
