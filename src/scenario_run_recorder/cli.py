"""Command line interface entry point."""

from __future__ import annotations

import sys

import click

from scenario_run_recorder.attachments import InvalidAttachmentError
from scenario_run_recorder.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    RunContext,
    load_configuration,
    write_placeholder_configuration,
)
from scenario_run_recorder.envelopes import EnvelopeDecodeError, MissingReferenceError
from scenario_run_recorder.lifecycle import ProtocolViolationError
from scenario_run_recorder.orchestration import RecorderHandlers, ReplayError, replay_event_file
from scenario_run_recorder.run_boundary import RunBoundaryDriver


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="scenario-run-recorder")
def cli() -> None:
    """Ordered message log and reports for scenario test runs."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML report configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML report configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="render-reports")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON report configuration file",
)
def render_reports(config_path: str) -> None:
    """Derive the enabled reports from an existing message log."""
    try:
        configuration = load_configuration(config_path)
        driver = RunBoundaryDriver(configuration)
        if not driver.run_log.exists():
            raise CliError(f"Message log not found: {driver.run_log.path}")
        driver.render_reports()
    except (ConfigurationError, EnvelopeDecodeError, OSError) as exc:
        raise CliError(str(exc)) from exc
    for settings in (configuration.json, configuration.html):
        if settings.enabled:
            click.echo(str(settings.output))


@cli.command(name="replay")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON report configuration file",
)
@click.option(
    "--events",
    "events_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to an NDJSON file of recorded orchestrator events",
)
def replay(config_path: str, events_path: str) -> None:
    """Record a run from a file of orchestrator lifecycle events."""
    try:
        configuration = load_configuration(config_path)
        handlers = RecorderHandlers(RunContext(configuration=configuration, is_text_terminal=True))
        replay_event_file(handlers, events_path)
    except (
        ConfigurationError,
        ReplayError,
        ProtocolViolationError,
        MissingReferenceError,
        InvalidAttachmentError,
        EnvelopeDecodeError,
        OSError,
    ) as exc:
        raise CliError(str(exc)) from exc
    if configuration.messages.enabled:
        click.echo(str(configuration.messages.output))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
