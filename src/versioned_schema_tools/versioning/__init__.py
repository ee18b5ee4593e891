"""Versioning domain exports."""

from .version_extractor import (
    SemVer,
    VersionError,
    coerce_semver,
    extract_version,
    get_field,
    parse_semver,
)

__all__ = [
    "SemVer",
    "VersionError",
    "coerce_semver",
    "extract_version",
    "get_field",
    "parse_semver",
]
