"""Numeric bounds domain exports."""

from .bounds_enforcer import (
    DATA_KEYWORDS,
    NAMED_SUBSCHEMA_KEYWORDS,
    NUMERIC_TYPES,
    NumericBounds,
    enforce_numeric_bounds,
    is_numeric_node,
)

__all__ = [
    "DATA_KEYWORDS",
    "NAMED_SUBSCHEMA_KEYWORDS",
    "NUMERIC_TYPES",
    "NumericBounds",
    "enforce_numeric_bounds",
    "is_numeric_node",
]
