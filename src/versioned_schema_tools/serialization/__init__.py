"""Serialization domain exports."""

from .schema_reader import parse_object, read_object
from .schema_serializer import (
    SCHEMA_KEY_SORT_ORDER,
    SUPPORTED_CONTENT_TYPES,
    SerializationError,
    serialize,
    sort_schema_keys,
    write_object,
)

__all__ = [
    "SCHEMA_KEY_SORT_ORDER",
    "SUPPORTED_CONTENT_TYPES",
    "SerializationError",
    "parse_object",
    "read_object",
    "serialize",
    "sort_schema_keys",
    "write_object",
]
