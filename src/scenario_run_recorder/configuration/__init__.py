"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, build_configuration, load_configuration
from .runtime_settings import Configuration, OutputSettings, PrettySettings, RunContext

__all__ = [
    "Configuration",
    "OutputSettings",
    "PrettySettings",
    "RunContext",
    "ConfigurationError",
    "build_configuration",
    "load_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
