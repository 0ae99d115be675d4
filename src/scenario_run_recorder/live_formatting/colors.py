"""Terminal color detection."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import TextIO


def use_colors(
    environ: Mapping[str, str] | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Return True when live output should be colored.

    ``NO_COLOR`` disables and ``FORCE_COLOR`` enables colors regardless of the
    stream; otherwise colors are used only when the stream is a terminal.
    """
    env = os.environ if environ is None else environ
    if env.get("NO_COLOR"):
        return False
    force = env.get("FORCE_COLOR")
    if force is not None:
        return force not in ("0", "false")
    target = sys.stdout if stream is None else stream
    isatty = getattr(target, "isatty", None)
    return bool(isatty and isatty())
