"""Logging configuration for command line use."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER_NAME = "versioned_schema_tools"

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

logging.getLogger(PACKAGE_LOGGER_NAME).addHandler(logging.NullHandler())


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def resolve_log_level(level: str | int) -> int:
    """Map a level name such as "warning" to its logging constant."""
    if isinstance(level, int):
        return level
    try:
        return LOG_LEVELS[level.lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}"
        ) from exc


def configure_logging(
    level: str | int = logging.WARNING, *, stderr_level: int = logging.WARNING
) -> None:
    """Send DEBUG/INFO records to stdout and WARNING and above to stderr.

    Replaces any handlers on the root logger, so call it once per process.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolve_log_level(level))

    formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)
