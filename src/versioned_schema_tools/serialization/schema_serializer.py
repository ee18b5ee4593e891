"""Deterministic schema document serialization."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml

SCHEMA_KEY_SORT_ORDER: tuple[str, ...] = (
    "title",
    "description",
    "$id",
    "$schema",
    "type",
    "additionalProperties",
    "required",
    "properties",
    "allOf",
    "examples",
)

_KEY_RANK = {key: rank for rank, key in enumerate(SCHEMA_KEY_SORT_ORDER)}


class SerializationError(Exception):
    """Raised when a schema cannot be serialized as the requested content type."""


class _SchemaDumper(yaml.SafeDumper):
    """YAML dumper that never emits anchors or aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


def _represent_multiline_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data.rstrip("\n"):
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_SchemaDumper.add_representer(str, _represent_multiline_str)


def sort_schema_keys(node: Any) -> Any:
    """Return a copy of node with every mapping ordered by the schema key priority.

    Keys listed in SCHEMA_KEY_SORT_ORDER come first in that order; all other keys
    follow in their existing order.
    """
    if isinstance(node, Mapping):
        ordered_keys = sorted(
            enumerate(node.keys()),
            key=lambda item: (_KEY_RANK.get(item[1], len(_KEY_RANK)), item[0]),
        )
        return {key: sort_schema_keys(node[key]) for _, key in ordered_keys}
    if isinstance(node, list):
        return [sort_schema_keys(item) for item in node]
    return node


def _serialize_yaml(schema: Any) -> str:
    return yaml.dump(
        sort_schema_keys(schema),
        Dumper=_SchemaDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=120,
    )


def _serialize_json(schema: Any) -> str:
    return json.dumps(schema, indent=2, ensure_ascii=False) + "\n"


_SERIALIZERS: dict[str, Callable[[Any], str]] = {
    "yaml": _serialize_yaml,
    "json": _serialize_json,
}

SUPPORTED_CONTENT_TYPES: tuple[str, ...] = tuple(_SERIALIZERS)


def serialize(schema: Any, content_type: str = "yaml") -> str:
    """Serialize schema as the given content type, either yaml or json."""
    serializer = _SERIALIZERS.get(content_type)
    if serializer is None:
        raise SerializationError(
            f"No serializer for {content_type} is defined. "
            f"content type must be one of {','.join(SUPPORTED_CONTENT_TYPES)}"
        )
    return serializer(schema)


def write_object(schema: Any, path: Path | str, content_type: str) -> Path:
    """Serialize schema and write it to path."""
    text = serialize(schema, content_type)
    destination = Path(path)
    destination.write_text(text, encoding="utf-8")
    return destination
