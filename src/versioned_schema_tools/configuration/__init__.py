"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_options
from .tool_options import (
    DEFAULT_CONFIG_PATHS,
    MAX_SAFE_INTEGER,
    MIN_SAFE_INTEGER,
    ToolOptions,
)

__all__ = [
    "ToolOptions",
    "ConfigurationError",
    "load_options",
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_CONFIG_PATHS",
    "MAX_SAFE_INTEGER",
    "MIN_SAFE_INTEGER",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
