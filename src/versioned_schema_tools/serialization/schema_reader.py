"""Schema document parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .schema_serializer import SerializationError


class _SchemaLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings.

    Schema documents are also serialized as JSON, which has no date type.
    """


_SchemaLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_object(text: str, source: str = "<string>") -> Any:
    """Parse YAML or JSON text into a Python object."""
    try:
        return yaml.load(text, Loader=_SchemaLoader)  # noqa: S506 - _SchemaLoader is a SafeLoader
    except yaml.YAMLError as exc:
        raise SerializationError(f"Failed to parse {source}: {exc}") from exc


def read_object(path: Path | str) -> Any:
    """Read and parse a YAML or JSON file."""
    source = Path(path)
    return parse_object(source.read_text(encoding="utf-8"), str(source))
