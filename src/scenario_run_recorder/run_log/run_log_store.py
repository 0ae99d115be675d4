"""Append-only NDJSON message log."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from scenario_run_recorder.envelopes import Envelope, iter_envelopes, serialize_envelope

logger = logging.getLogger(__name__)


class RunLogStore:
    """Persisted sequence of envelopes for a whole run, one JSON record per line.

    Records are written in the order they are given; nothing is reordered or
    deduplicated. Every write completes (and the file is closed) before the
    call returns.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def reset(self) -> None:
        """Remove any previous log contents and make sure the parent directory exists."""
        self._path.unlink(missing_ok=True)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("reset message log at %s", self._path)

    def append(self, envelope: Envelope) -> None:
        self.append_many((envelope,))

    def append_many(self, envelopes: Iterable[Envelope]) -> None:
        lines = [serialize_envelope(envelope) + "\n" for envelope in envelopes]
        if not lines:
            return
        with self._path.open("a", encoding="utf-8") as handle:
            handle.writelines(lines)
        logger.debug("appended %d envelope(s) to %s", len(lines), self._path)

    def iter_lines(self) -> Iterator[str]:
        """Yield the raw NDJSON records of the log."""
        with self._path.open("r", encoding="utf-8") as handle:
            yield from handle

    def read_all(self) -> list[Envelope]:
        return list(iter_envelopes(self.iter_lines()))
