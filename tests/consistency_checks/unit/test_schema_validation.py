"""jsonschema backed validation tests."""

from __future__ import annotations

from versioned_schema_tools.consistency_checks import (
    check_schema_security,
    check_schema_validity,
    validate_instance,
)


def test_valid_draft7_schema_has_no_errors() -> None:
    schema = {"type": "object", "properties": {"name": {"type": "string"}}, "required": ["name"]}

    assert check_schema_validity(schema) == []


def test_invalid_schema_reports_location() -> None:
    messages = check_schema_validity({"type": "object", "properties": {"name": {"type": 12}}})

    assert messages
    assert messages[0].startswith("#/properties/name/type: ")


def test_format_without_max_length_is_insecure() -> None:
    insecure = {"type": "object", "properties": {"uri": {"type": "string", "format": "uri"}}}
    secure = {
        "type": "object",
        "properties": {"uri": {"type": "string", "format": "uri", "maxLength": 1024}},
    }

    assert check_schema_security(secure) == []
    assert check_schema_security(insecure)


def test_pattern_properties_need_bounded_property_names() -> None:
    schema = {"type": "object", "patternProperties": {"^x_": {"type": "string"}}}

    assert check_schema_security(schema)
    bounded = {**schema, "propertyNames": {"maxLength": 64}}
    assert check_schema_security(bounded) == []


def test_validate_instance_formats_errors() -> None:
    schema = {"type": "object", "properties": {"count": {"type": "integer"}}}

    assert validate_instance({"count": 1}, schema) == []
    assert validate_instance({"count": "one"}, schema) == [
        "#/count: 'one' is not of type 'integer'"
    ]
