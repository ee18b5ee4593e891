"""Dereferencing domain exports."""

from .allof_merger import MergeConflictError, merge_all_of, merge_schemas
from .reference_resolver import (
    Fetcher,
    ResolutionError,
    build_candidate_uri,
    fetch_remote_text,
    fetch_uri_text,
    get_schema_by_id,
    resolve_reference,
    uri_has_scheme,
)
from .schema_dereferencer import (
    CircularReferenceError,
    DereferenceError,
    dereference_schema,
    resolve_json_pointer,
)

__all__ = [
    "CircularReferenceError",
    "DereferenceError",
    "Fetcher",
    "MergeConflictError",
    "ResolutionError",
    "build_candidate_uri",
    "dereference_schema",
    "fetch_remote_text",
    "fetch_uri_text",
    "get_schema_by_id",
    "merge_all_of",
    "merge_schemas",
    "resolve_json_pointer",
    "resolve_reference",
    "uri_has_scheme",
]
