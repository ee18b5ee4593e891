"""Numeric bounds enforcement for schema documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

NUMERIC_TYPES = ("number", "integer")

NumericBounds = tuple[float, float]

# Keywords whose values are instance data, not sub-schemas.
DATA_KEYWORDS = frozenset({"const", "default", "enum", "examples"})

# Keywords whose values map property or definition names to sub-schemas.
NAMED_SUBSCHEMA_KEYWORDS = frozenset({"properties", "patternProperties", "definitions"})


def is_numeric_node(node: Any) -> bool:
    """Return True when node is a schema node declaring a number or integer type."""
    return isinstance(node, Mapping) and node.get("type") in NUMERIC_TYPES


def enforce_numeric_bounds(schema: Any, bounds: Sequence[float] | None) -> Any:
    """Return a copy of schema where every numeric node carries minimum and maximum.

    A bound is only injected when the node does not already declare it. Explicit
    bounds, including 0, are kept verbatim.
    """
    if bounds is None:
        return _copy_tree(schema)
    enforced_min, enforced_max = bounds
    return _enforce(schema, enforced_min, enforced_max)


def _enforce(
    node: Any, enforced_min: float, enforced_max: float, *, named: bool = False
) -> Any:
    if isinstance(node, Mapping):
        enforced = {
            key: (
                _copy_tree(value)
                if key in DATA_KEYWORDS and not named
                else _enforce(
                    value,
                    enforced_min,
                    enforced_max,
                    named=not named and key in NAMED_SUBSCHEMA_KEYWORDS,
                )
            )
            for key, value in node.items()
        }
        if not named and is_numeric_node(enforced):
            if enforced.get("minimum") is None:
                enforced["minimum"] = enforced_min
            if enforced.get("maximum") is None:
                enforced["maximum"] = enforced_max
        return enforced
    if isinstance(node, list):
        return [_enforce(item, enforced_min, enforced_max) for item in node]
    return node


def _copy_tree(node: Any) -> Any:
    if isinstance(node, Mapping):
        return {key: _copy_tree(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_copy_tree(item) for item in node]
    return node
