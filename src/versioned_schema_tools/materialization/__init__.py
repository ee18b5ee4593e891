"""Materialization domain exports."""

from .schema_materializer import (
    MaterializationError,
    materialize_all_schemas,
    materialize_modified_schemas,
    materialize_schema,
    materialize_schema_file,
    materialize_schema_to_path,
)
from .symlink_pointers import SymlinkError, read_pointed_version, replace_symlink

__all__ = [
    "MaterializationError",
    "SymlinkError",
    "materialize_all_schemas",
    "materialize_modified_schemas",
    "materialize_schema",
    "materialize_schema_file",
    "materialize_schema_to_path",
    "read_pointed_version",
    "replace_symlink",
]
