"""Live formatting exports."""

from .colors import use_colors
from .pretty_channel import (
    ChannelFactory,
    EnvelopeObserver,
    IndentedLineSink,
    LiveFormatterChannel,
    open_live_formatter_channel,
)
from .pretty_formatter import PrettyFormatter

__all__ = [
    "ChannelFactory",
    "EnvelopeObserver",
    "IndentedLineSink",
    "LiveFormatterChannel",
    "PrettyFormatter",
    "open_live_formatter_channel",
    "use_colors",
]
