"""Semantic version parsing and extraction from schema documents."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

_STRICT_SEMVER_PATTERN = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)
_COERCE_PATTERN = re.compile(r"(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?")
_PATH_TOKEN_PATTERN = re.compile(r"[^.\[\]]+|\[(\d+)\]")

_MISSING = object()


class VersionError(Exception):
    """Raised when a schema version cannot be determined."""


@dataclass(frozen=True, order=True)
class SemVer:
    """Semantic version core (major.minor.patch)."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_semver(text: str) -> SemVer | None:
    """Parse a strict semantic version string, returning None when it is not one."""
    match = _STRICT_SEMVER_PATTERN.match(text.strip())
    if match is None:
        return None
    return SemVer(int(match.group(1)), int(match.group(2)), int(match.group(3)))


def coerce_semver(text: str) -> SemVer | None:
    """Coerce the first version-like digit run in text into a SemVer.

    Missing minor and patch components are zero-padded, so "v2" becomes 2.0.0.
    """
    match = _COERCE_PATTERN.search(text)
    if match is None:
        return None
    major, minor, patch = (int(group) if group else 0 for group in match.groups())
    return SemVer(major, minor, patch)


def get_field(document: Any, field_path: str, default: Any = None) -> Any:
    """Return the value at a dotted/indexed field path such as "info.versions[0]"."""
    if isinstance(document, Mapping) and field_path in document:
        return document[field_path]
    current = document
    for token in _PATH_TOKEN_PATTERN.finditer(field_path):
        index = token.group(1)
        if index is not None:
            if not isinstance(current, Sequence) or isinstance(current, str):
                return default
            position = int(index)
            if position >= len(current):
                return default
            current = current[position]
            continue
        key = token.group(0)
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return default
    return current


def extract_version(schema: Any, field_path: str = "$id") -> SemVer:
    """Return the semantic version of schema read from field_path.

    If the field value looks like a URI path, only its final path segment is used.
    """
    value = get_field(schema, field_path)
    if value is None:
        raise VersionError(f"Schema has no version field '{field_path}'.")
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise VersionError(f"Schema version field '{field_path}' must be a string.")
    text = str(value)
    if "/" in text:
        text = text.rstrip("/").rsplit("/", 1)[-1]
    version = coerce_semver(text)
    if version is None:
        raise VersionError(
            f"Could not extract a semantic version from {field_path} value '{value}'."
        )
    return version
