"""Side-channel that renders envelopes to the terminal while a spec executes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import click

from scenario_run_recorder.envelopes import Envelope

from .colors import use_colors
from .pretty_formatter import PrettyFormatter

logger = logging.getLogger(__name__)


class EnvelopeObserver(Protocol):
    """Receives every envelope forwarded by the lifecycle session."""

    def on_envelope(self, envelope: Envelope) -> None: ...

    def close(self) -> None: ...


class IndentedLineSink:
    """Splits text chunks into lines, indents non-empty lines and echoes them."""

    def __init__(self, echo: Callable[[str], None] | None = None) -> None:
        self._echo = echo or click.echo
        self._pending = ""
        self._closed = False

    def write(self, chunk: str) -> None:
        if self._closed:
            raise ValueError("write to closed sink")
        lines = (self._pending + chunk).split("\n")
        self._pending = lines.pop()
        for line in lines:
            self._echo_line(line)

    def close(self) -> None:
        if self._closed:
            return
        if self._pending:
            self._echo_line(self._pending)
            self._pending = ""
        self._closed = True

    def _echo_line(self, line: str) -> None:
        self._echo("" if not line else "  " + line)


class LiveFormatterChannel:
    """Pairs a pretty formatter with the sink its chunks are written to."""

    def __init__(self, formatter: PrettyFormatter, sink: IndentedLineSink) -> None:
        self._formatter = formatter
        self._sink = sink

    def on_envelope(self, envelope: Envelope) -> None:
        self._formatter.on_envelope(envelope)

    def close(self) -> None:
        self._sink.close()


ChannelFactory = Callable[[], EnvelopeObserver]


def open_live_formatter_channel(
    colors: bool | None = None,
    echo: Callable[[str], None] | None = None,
) -> LiveFormatterChannel:
    """Open a fresh channel; colors default to terminal detection."""
    resolved_colors = use_colors() if colors is None else colors
    sink = IndentedLineSink(echo=echo)
    formatter = PrettyFormatter(resolved_colors, sink.write)
    logger.debug("opened live formatter channel (colors=%s)", resolved_colors)
    return LiveFormatterChannel(formatter, sink)
