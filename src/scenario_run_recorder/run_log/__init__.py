"""Run log exports."""

from .run_log_store import RunLogStore

__all__ = ["RunLogStore"]
