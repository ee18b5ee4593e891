"""Robustness rules evaluated against every schema file."""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.numeric_bounds import (
    DATA_KEYWORDS,
    NAMED_SUBSCHEMA_KEYWORDS,
    is_numeric_node,
)
from versioned_schema_tools.repository_scanning import SchemaInfo

from .check_outcomes import RuleResult
from .rule_recording import RuleRecorder, assert_no_violations, assert_rule
from .schema_validation import check_schema_security, check_schema_validity, validate_instance

ROBUSTNESS_SUITE = "robustness"

SNAKE_CASE_PATTERN = re.compile(r"^[$a-z]+[a-z0-9_]*$")


def snake_case_violations(node: Any, path: str = "") -> list[str]:
    """Return a message for every property name, at any depth, that is not snake_case."""
    if not isinstance(node, Mapping):
        return []
    violations = []
    for sub_schema in _list_of(node.get("allOf")):
        violations.extend(snake_case_violations(sub_schema, path))
    for name, sub_schema in _mapping_of(node.get("properties")).items():
        property_path = f"{path}/properties/{name}"
        if not SNAKE_CASE_PATTERN.match(name):
            violations.append(f"Non snake_case property name at #{property_path}")
        violations.extend(snake_case_violations(sub_schema, property_path))
    return violations


def deterministic_type_violations(node: Any, path: str = "") -> list[str]:
    """Return a message for every schema node whose type is not deterministic.

    Union types are rejected, properties must declare a type, arrays must
    declare items.type, objects must declare their shape and oneOf branches
    must agree on type (and, for objects, on required properties).
    """
    if not isinstance(node, Mapping):
        return []
    violations = []
    node_type = node.get("type")
    if isinstance(node_type, list):
        violations.append(f"Polymorphic type at #{path}")

    for name, sub_schema in _mapping_of(node.get("properties")).items():
        property_path = f"{path}/properties/{name}"
        if not isinstance(sub_schema, Mapping) or "type" not in sub_schema:
            violations.append(f"Missing type at #{property_path}")
        violations.extend(deterministic_type_violations(sub_schema, property_path))

    if node_type == "array":
        items = node.get("items")
        if not isinstance(items, Mapping) or "type" not in items:
            violations.append(f"Array without items.type at #{path}")
    if isinstance(node.get("items"), Mapping):
        violations.extend(deterministic_type_violations(node["items"], f"{path}/items"))

    if node_type == "object" and not any(
        keyword in node for keyword in ("properties", "oneOf", "allOf", "additionalProperties")
    ):
        violations.append(
            f"Object without properties, oneOf, allOf or additionalProperties at #{path}"
        )

    additional = node.get("additionalProperties")
    if isinstance(additional, Mapping):
        additional_path = f"{path}/additionalProperties"
        if "type" not in additional:
            violations.append(f"Missing type at #{additional_path}")
        violations.extend(deterministic_type_violations(additional, additional_path))

    for sub_schema in _list_of(node.get("allOf")):
        violations.extend(deterministic_type_violations(sub_schema, path))

    branches = [branch for branch in _list_of(node.get("oneOf")) if isinstance(branch, Mapping)]
    violations.extend(_one_of_violations(branches, path))
    for index, branch in enumerate(branches):
        violations.extend(deterministic_type_violations(branch, f"{path}/oneOf/{index}"))
    return violations


def required_property_violations(node: Any, path: str = "") -> list[str]:
    """Return a message for every required property name missing from properties."""
    if not isinstance(node, Mapping):
        return []
    violations = []
    properties = node.get("properties")
    if node.get("required"):
        if not isinstance(properties, Mapping):
            violations.append(f"#{path}/properties must exist")
            properties = {}
        for name in node["required"]:
            if name not in properties:
                violations.append(f"#{path}/properties/{name} is required but does not exist")
    for name, sub_schema in _mapping_of(properties).items():
        violations.extend(required_property_violations(sub_schema, f"{path}/properties/{name}"))
    return violations


def numeric_bounds_violations(schema: Any, bounds: Sequence[float]) -> list[str]:
    """Return a message for every numeric node without minimum and maximum inside bounds."""
    enforced_min, enforced_max = bounds
    violations = []
    for path, node in _iter_schema_nodes(schema):
        if not is_numeric_node(node):
            continue
        minimum, maximum = node.get("minimum"), node.get("maximum")
        if not _is_number(minimum):
            violations.append(f"#{path} does not have a valid minimum value")
        elif minimum < enforced_min:
            violations.append(
                f"#{path} has a minimum {minimum} lower than the enforced minimum {enforced_min}"
            )
        if not _is_number(maximum):
            violations.append(f"#{path} does not have a valid maximum value")
        elif maximum > enforced_max:
            violations.append(
                f"#{path} has a maximum {maximum} higher than the enforced maximum {enforced_max}"
            )
    return violations


def check_robustness(
    schema_infos: Sequence[SchemaInfo],
    options: ToolOptions,
) -> list[RuleResult]:
    """Evaluate robustness rules for each schema file; current sources get the basic ones only."""
    recorder = RuleRecorder(ROBUSTNESS_SUITE, options.skip_schema_test_cases)
    for info in schema_infos:
        _check_schema_file(recorder, info, options)
    return recorder.results


def _check_schema_file(recorder: RuleRecorder, info: SchemaInfo, options: ToolOptions) -> None:
    subject = _subject(info, options)
    schema = info.schema
    schema_id = info.schema_id

    def evaluate(rule: str, check) -> None:
        recorder.evaluate(subject, rule, check, schema_id=schema_id)

    evaluate(
        "valid-json-schema",
        lambda: assert_no_violations(check_schema_validity(schema), "Schema is invalid"),
    )
    evaluate(
        "secure-json-schema",
        lambda: assert_no_violations(check_schema_security(schema), "Schema is insecure"),
    )
    evaluate(
        "snake-case-properties",
        lambda: assert_no_violations(
            snake_case_violations(schema), "Property names must be snake_case"
        ),
    )
    evaluate(
        "deterministic-types",
        lambda: assert_no_violations(
            deterministic_type_violations(schema), "Types must be deterministic"
        ),
    )
    if info.current:
        return

    evaluate(
        "required-properties-exist",
        lambda: assert_no_violations(
            required_property_violations(schema), "Required properties must exist"
        ),
    )
    examples = schema.get("examples") if isinstance(schema, Mapping) else None
    if options.require_examples:
        evaluate("has-examples", lambda: assert_rule(examples, "Schema must have examples"))
    for index, example in enumerate(_list_of(examples)):
        evaluate(
            f"example-{index}-validates",
            lambda example=example: assert_no_violations(
                validate_instance(example, schema), "Example does not validate against schema"
            ),
        )
        evaluate(
            f"example-{index}-schema-matches-id",
            lambda example=example: _assert_example_schema_matches_id(example, schema_id),
        )
    if options.enforced_numeric_bounds is not None:
        bounds = options.enforced_numeric_bounds
        evaluate(
            "numeric-bounds",
            lambda: assert_no_violations(
                numeric_bounds_violations(schema, bounds),
                "Numeric fields must have minimum and maximum inside the enforced bounds",
            ),
        )


def _assert_example_schema_matches_id(example: Any, schema_id: str) -> None:
    actual = example.get("$schema") if isinstance(example, Mapping) else None
    assert_rule(
        actual == schema_id,
        "Example $schema value must match the schema $id value",
        expected=schema_id,
        actual=actual,
    )


def _iter_schema_nodes(node: Any, path: str = "") -> Iterator[tuple[str, Any]]:
    """Yield (json pointer, node) for every sub-schema, skipping instance data keywords."""
    if isinstance(node, Mapping):
        yield path, node
        for key, value in node.items():
            if key in DATA_KEYWORDS:
                continue
            if key in NAMED_SUBSCHEMA_KEYWORDS and isinstance(value, Mapping):
                for name, sub_schema in value.items():
                    yield from _iter_schema_nodes(sub_schema, f"{path}/{key}/{name}")
            else:
                yield from _iter_schema_nodes(value, f"{path}/{key}")
    elif isinstance(node, list):
        for index, item in enumerate(node):
            yield from _iter_schema_nodes(item, f"{path}/{index}")


def _subject(info: SchemaInfo, options: ToolOptions) -> str:
    return Path(os.path.relpath(info.path, options.schema_base_path)).as_posix()


def _mapping_of(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _list_of(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _one_of_violations(branches: list[Mapping[str, Any]], path: str) -> list[str]:
    if not branches:
        return []
    types = {str(branch.get("type")) for branch in branches}
    if len(types) > 1:
        return [f"oneOf branches with differing types {sorted(types)} at #{path}"]
    if types == {"object"}:
        required_sets = {frozenset(branch.get("required") or ()) for branch in branches}
        if len(required_sets) > 1:
            return [f"oneOf object branches with differing required properties at #{path}"]
    return []
