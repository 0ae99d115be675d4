"""Run boundary exports."""

from .run_boundary_driver import RunBoundaryDriver
from .run_metadata import PROTOCOL_VERSION, build_meta_envelope, detect_ci

__all__ = [
    "PROTOCOL_VERSION",
    "RunBoundaryDriver",
    "build_meta_envelope",
    "detect_ci",
]
