"""Ordered message log, live rendering and reports for scenario test runs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("scenario-run-recorder")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"
