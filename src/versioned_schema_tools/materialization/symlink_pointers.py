"""Symlink maintenance for versioned schema directories."""

from __future__ import annotations

import logging
from pathlib import Path

from versioned_schema_tools.serialization import SerializationError, read_object
from versioned_schema_tools.versioning import SemVer, VersionError, extract_version

_LOGGER = logging.getLogger(__name__)


class SymlinkError(Exception):
    """Raised when a symlink cannot be replaced."""


def replace_symlink(target_name: str, symlink_path: Path) -> Path:
    """Point symlink_path at target_name, removing whatever is there first."""
    try:
        symlink_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise SymlinkError(
            f"{symlink_path} exists but could not be unlinked. "
            f"Cannot create symlink to {target_name}."
        ) from exc
    try:
        symlink_path.symlink_to(target_name)
    except OSError as exc:
        raise SymlinkError(
            f"Could not create symlink {symlink_path} -> {target_name}: {exc}"
        ) from exc
    return symlink_path


def read_pointed_version(symlink_path: Path, version_field: str) -> SemVer | None:
    """Return the version of the schema symlink_path resolves to.

    A missing or dangling symlink, or a target without a readable version,
    yields None.
    """
    if not symlink_path.exists():
        return None
    try:
        return extract_version(read_object(symlink_path), version_field)
    except (OSError, SerializationError, VersionError) as exc:
        _LOGGER.warning("Ignoring unreadable latest schema %s: %s", symlink_path, exc)
        return None
