"""Backward compatibility between consecutive versions of a schema major version."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.numeric_bounds import NAMED_SUBSCHEMA_KEYWORDS
from versioned_schema_tools.repository_scanning import SchemaInfosByTitleAndMajor

from .check_outcomes import RuleResult, RuleViolation
from .rule_recording import RuleRecorder

COMPATIBILITY_SUITE = "compatibility"
COMPATIBILITY_RULE = "schema-version-compatibility"

# These fields may change freely between versions.
FIELDS_ALLOWED_TO_CHANGE = frozenset({"$id", "description", "examples"})


def assert_compatible(
    new_schema: Any, old_schema: Any, path: str = "", *, named: bool = False
) -> None:
    """Raise RuleViolation unless new_schema is backward compatible with old_schema.

    Every field of old_schema must be present in new_schema with a compatible
    value, except FIELDS_ALLOWED_TO_CHANGE. required lists must hold the same
    names and a new enum must be a superset of the old one.
    named marks a mapping of property or definition names, whose keys are not
    schema keywords.
    """
    if _kind(new_schema) != _kind(old_schema):
        raise RuleViolation(
            f"Incompatible change at path: {path or '.'}",
            expected=old_schema,
            actual=new_schema,
        )
    if isinstance(old_schema, Mapping):
        for key, old_value in old_schema.items():
            key_path = f"{path}.{key}"
            if named:
                _assert_field_compatible(new_schema, key, old_value, key_path)
            elif key in FIELDS_ALLOWED_TO_CHANGE:
                continue
            elif key == "required":
                _assert_required_compatible(new_schema.get("required"), old_value, key_path)
            elif key == "enum":
                _assert_enum_compatible(new_schema.get("enum"), old_value, key_path)
            else:
                _assert_field_compatible(
                    new_schema,
                    key,
                    old_value,
                    key_path,
                    named=key in NAMED_SUBSCHEMA_KEYWORDS,
                )
    elif isinstance(old_schema, list):
        for index, old_value in enumerate(old_schema):
            item_path = f"{path}.{index}"
            if index >= len(new_schema):
                raise RuleViolation(
                    f"Removed item at path: {item_path}", expected=old_value, actual=None
                )
            assert_compatible(new_schema[index], old_value, item_path)
    elif new_schema != old_schema:
        raise RuleViolation(
            f"Changed value at path: {path or '.'}", expected=old_schema, actual=new_schema
        )


def check_compatibility(
    schemas_by_title_and_major: SchemaInfosByTitleAndMajor,
    options: ToolOptions,
) -> list[RuleResult]:
    """Check each materialized primary version against the previous one of its major."""
    recorder = RuleRecorder(COMPATIBILITY_SUITE, options.skip_schema_test_cases)
    for title, infos_by_major in schemas_by_title_and_major.items():
        for infos in infos_by_major.values():
            materialized = sorted(
                (
                    info
                    for info in infos
                    if not info.current and info.content_type == options.primary_content_type
                ),
                key=lambda info: info.version,
            )
            for old_info, new_info in zip(materialized, materialized[1:]):
                recorder.evaluate(
                    f"{title} {new_info.version} compatible with {old_info.version}",
                    COMPATIBILITY_RULE,
                    lambda new=new_info, old=old_info: assert_compatible(new.schema, old.schema),
                    schema_id=new_info.schema_id,
                )
    return recorder.results


def _assert_field_compatible(
    new_schema: Mapping[str, Any], key: str, old_value: Any, path: str, *, named: bool = False
) -> None:
    if key not in new_schema:
        raise RuleViolation(f"Removed field at path: {path}", expected=old_value, actual=None)
    assert_compatible(new_schema[key], old_value, path, named=named)


def _assert_required_compatible(new_required: Any, old_required: Any, path: str) -> None:
    if new_required is None:
        raise RuleViolation(
            f"Removed list of required properties at: {path}",
            expected=old_required,
            actual=new_required,
        )
    if set(new_required) != set(old_required):
        raise RuleViolation(
            f"Requiredness of properties cannot be modified at: {path}",
            expected=old_required,
            actual=new_required,
        )


def _assert_enum_compatible(new_enum: Any, old_enum: Any, path: str) -> None:
    if new_enum is None:
        raise RuleViolation(f"Removed enum at: {path}", expected=old_enum, actual=new_enum)
    if not all(value in new_enum for value in old_enum):
        raise RuleViolation(
            f"New enum is not superset of old enum at: {path}",
            expected=old_enum,
            actual=new_enum,
        )


def _kind(value: Any) -> str:
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if value is None:
        return "null"
    return type(value).__name__
