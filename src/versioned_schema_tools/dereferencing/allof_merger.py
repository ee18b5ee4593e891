"""Merging of allOf compositions into their parent schema node."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from versioned_schema_tools.numeric_bounds import DATA_KEYWORDS, NAMED_SUBSCHEMA_KEYWORDS

_LOWER_BOUND_KEYWORDS = frozenset(
    {"minimum", "exclusiveMinimum", "minLength", "minItems", "minProperties"}
)
_UPPER_BOUND_KEYWORDS = frozenset(
    {"maximum", "exclusiveMaximum", "maxLength", "maxItems", "maxProperties"}
)


class MergeConflictError(Exception):
    """Raised when allOf sub-schemas cannot be merged into one schema."""

    def __init__(self, path: str, keyword: str, values: Sequence[Any]):
        self.path = path
        self.keyword = keyword
        self.values = tuple(values)
        super().__init__(f"Cannot merge allOf {keyword} values {list(values)} at #{path}")


def merge_all_of(schema: Any, path: str = "", *, named: bool = False) -> Any:
    """Return a copy of schema with every allOf merged into its parent node.

    Nested compositions are merged bottom-up, so the result contains no allOf.
    named marks a mapping of property or definition names to sub-schemas.
    """
    if isinstance(schema, Mapping) and named:
        return {key: merge_all_of(value, f"{path}/{key}") for key, value in schema.items()}
    if isinstance(schema, Mapping):
        processed = {
            key: (
                value
                if key in DATA_KEYWORDS
                else merge_all_of(
                    value, f"{path}/{key}", named=key in NAMED_SUBSCHEMA_KEYWORDS
                )
            )
            for key, value in schema.items()
        }
        sub_schemas = processed.pop("allOf", None)
        if sub_schemas is None:
            return processed
        if not isinstance(sub_schemas, list):
            raise MergeConflictError(path, "allOf", [sub_schemas])
        parts = [processed] + [sub for sub in sub_schemas if isinstance(sub, Mapping)]
        return merge_schemas(parts, path)
    if isinstance(schema, list):
        return [merge_all_of(item, f"{path}/{index}") for index, item in enumerate(schema)]
    return schema


def merge_schemas(schemas: Sequence[Mapping[str, Any]], path: str = "") -> dict[str, Any]:
    """Merge schemas in order into a single schema.

    properties are unioned with the last definition of a name winning, required
    lists are concatenated without duplicates, enums are intersected, numeric
    limits are narrowed, and any other keyword (additionalProperties included)
    keeps its first value.
    """
    merged: dict[str, Any] = {}
    for schema in schemas:
        for key, value in schema.items():
            if key not in merged:
                merged[key] = value
                continue
            merger = _KEYWORD_MERGERS.get(key)
            if merger is not None:
                merged[key] = merger(merged[key], value, path, key)
            elif key in _LOWER_BOUND_KEYWORDS:
                merged[key] = _merge_limit(merged[key], value, max)
            elif key in _UPPER_BOUND_KEYWORDS:
                merged[key] = _merge_limit(merged[key], value, min)
    return merged


def _merge_properties(existing: Any, incoming: Any, path: str, key: str) -> Any:
    if not isinstance(existing, Mapping) or not isinstance(incoming, Mapping):
        raise MergeConflictError(path, key, [existing, incoming])
    properties = dict(existing)
    properties.update(incoming)
    return properties


def _merge_lists(existing: Any, incoming: Any, path: str, key: str) -> list[Any]:
    if not isinstance(existing, list) or not isinstance(incoming, list):
        raise MergeConflictError(path, key, [existing, incoming])
    return _unique([*existing, *incoming])


def _merge_enum(existing: Any, incoming: Any, path: str, key: str) -> list[Any]:
    if not isinstance(existing, list) or not isinstance(incoming, list):
        raise MergeConflictError(path, key, [existing, incoming])
    intersection = [value for value in existing if value in incoming]
    if not intersection:
        raise MergeConflictError(path, key, [existing, incoming])
    return intersection


def _merge_type(existing: Any, incoming: Any, path: str, key: str) -> Any:
    if existing == incoming:
        return existing
    raise MergeConflictError(path, key, [existing, incoming])


def _merge_limit(existing: Any, incoming: Any, choose: Callable[[Any, Any], Any]) -> Any:
    if _is_number(existing) and _is_number(incoming):
        return choose(existing, incoming)
    return existing


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _unique(values: Sequence[Any]) -> list[Any]:
    unique: list[Any] = []
    for value in values:
        if value not in unique:
            unique.append(value)
    return unique


_KEYWORD_MERGERS: dict[str, Callable[[Any, Any, str, str], Any]] = {
    "properties": _merge_properties,
    "required": _merge_lists,
    "examples": _merge_lists,
    "enum": _merge_enum,
    "type": _merge_type,
}
