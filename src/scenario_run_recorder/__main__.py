"""Module entry point for `python -m scenario_run_recorder`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
