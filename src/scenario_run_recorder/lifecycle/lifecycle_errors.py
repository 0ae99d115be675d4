"""Lifecycle errors."""

from __future__ import annotations

EVENT_HANDLERS_DOCUMENTATION = "docs/event-handlers.md"


class ProtocolViolationError(Exception):
    """Raised when a lifecycle event arrives in a state that cannot accept it."""

    def __init__(self, handler: str, state: str) -> None:
        self.handler = handler
        self.state = state
        super().__init__(
            f"Unexpected state in {handler}: {state}. This almost always means that you or "
            "some other plugin, are overwriting this plugin's event handlers. For more "
            f"information & workarounds, see {EVENT_HANDLERS_DOCUMENTATION}"
        )
