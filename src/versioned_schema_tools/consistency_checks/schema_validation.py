"""JSON Schema validation through the jsonschema library.

Each check returns a list of human readable error messages; an empty list
means the document passed.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

# Security hardening meta-schema: a schema failing it may be slow to validate
# untrusted data with.
SECURE_META_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Meta-schema for the security assessment of JSON Schemas",
    "definitions": {
        "schemaArray": {"type": "array", "minItems": 1, "items": {"$ref": "#"}},
    },
    "dependencies": {
        "patternProperties": {
            "description": "prevent slow validation of large property names",
            "required": ["propertyNames"],
            "properties": {"propertyNames": {"required": ["maxLength"]}},
        },
        "uniqueItems": {
            "description": "prevent slow validation of large non-scalar arrays",
            "if": {
                "properties": {
                    "uniqueItems": {"const": True},
                    "items": {
                        "properties": {
                            "type": {
                                "anyOf": [
                                    {"enum": ["object", "array"]},
                                    {"type": "array", "contains": {"enum": ["object", "array"]}},
                                ]
                            }
                        }
                    },
                }
            },
            "then": {"required": ["maxItems"]},
        },
        "pattern": {
            "description": "prevent slow pattern matching of large strings",
            "required": ["maxLength"],
        },
        "format": {
            "description": "prevent slow format validation of large strings",
            "required": ["maxLength"],
        },
    },
    "properties": {
        "additionalItems": {"$ref": "#"},
        "additionalProperties": {"$ref": "#"},
        "dependencies": {"additionalProperties": {"anyOf": [{"type": "array"}, {"$ref": "#"}]}},
        "items": {"anyOf": [{"$ref": "#"}, {"$ref": "#/definitions/schemaArray"}]},
        "definitions": {"additionalProperties": {"$ref": "#"}},
        "patternProperties": {"additionalProperties": {"$ref": "#"}},
        "properties": {"additionalProperties": {"$ref": "#"}},
        "if": {"$ref": "#"},
        "then": {"$ref": "#"},
        "else": {"$ref": "#"},
        "allOf": {"$ref": "#/definitions/schemaArray"},
        "anyOf": {"$ref": "#/definitions/schemaArray"},
        "oneOf": {"$ref": "#/definitions/schemaArray"},
        "not": {"$ref": "#"},
        "contains": {"$ref": "#"},
        "propertyNames": {"$ref": "#"},
    },
}

_META_SCHEMA_VALIDATOR = Draft7Validator(Draft7Validator.META_SCHEMA)
_SECURE_META_SCHEMA_VALIDATOR = Draft7Validator(SECURE_META_SCHEMA)


def check_schema_validity(schema: Any) -> list[str]:
    """Validate schema against the draft-07 meta-schema."""
    return _format_errors(_META_SCHEMA_VALIDATOR.iter_errors(schema))


def check_schema_security(schema: Any) -> list[str]:
    """Validate schema against the security hardening meta-schema."""
    return _format_errors(_SECURE_META_SCHEMA_VALIDATOR.iter_errors(schema))


def validate_instance(instance: Any, schema: Any) -> list[str]:
    """Validate instance, e.g. one of a schema's examples, against schema."""
    return _format_errors(Draft7Validator(schema).iter_errors(instance))


def _format_errors(errors: Iterable[ValidationError]) -> list[str]:
    messages = []
    for error in errors:
        location = "/".join(str(part) for part in error.absolute_path)
        messages.append(f"#/{location}: {error.message}")
    return messages
