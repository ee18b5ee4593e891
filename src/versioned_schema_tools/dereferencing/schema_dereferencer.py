"""Schema dereferencing: $ref expansion followed by allOf merging."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from .allof_merger import MergeConflictError, merge_all_of
from .reference_resolver import Fetcher, ResolutionError, resolve_reference

_LOGGER = logging.getLogger(__name__)


class CircularReferenceError(Exception):
    """Raised when a $ref chain refers back to itself."""


class DereferenceError(Exception):
    """Raised when a schema cannot be dereferenced."""

    def __init__(self, schema_id: Any, cause: Exception):
        self.schema_id = schema_id
        self.cause = cause
        super().__init__(f"Failed dereferencing schema with $id {schema_id}: {cause}")


def dereference_schema(
    schema: Mapping[str, Any],
    base_uris: Sequence[str],
    *,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> Any:
    """Return a copy of schema with every $ref expanded and every allOf merged.

    Refs without a scheme are prefixed with each of base_uris in turn; "#/..."
    refs are JSON pointers into the document that contains them.
    """
    log = logger or _LOGGER
    schema_id = schema.get("$id") if isinstance(schema, Mapping) else None
    log.info(
        "Dereferencing schema with $id %s using schema base URIs %s",
        schema_id,
        list(base_uris),
    )
    try:
        expanded = _RefExpander(base_uris, fetcher=fetcher, logger=log).expand_root(schema)
        log.debug("Merging any allOf fields in schema with $id %s", schema_id)
        return merge_all_of(expanded)
    except (ResolutionError, MergeConflictError, CircularReferenceError) as exc:
        log.error("Failed dereferencing schema with $id %s: %s", schema_id, exc)
        raise DereferenceError(schema_id, exc) from exc


def resolve_json_pointer(document: Any, pointer: str) -> Any:
    """Return the value at a JSON pointer (RFC 6901) such as "/properties/dt"."""
    if pointer in ("", "/"):
        return document
    current = document
    for raw_token in pointer.lstrip("/").split("/"):
        token = raw_token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, Mapping) and token in current:
            current = current[token]
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            raise KeyError(pointer)
    return current


class _RefExpander:
    """Expands $refs for one dereference call, caching resolved documents."""

    def __init__(
        self,
        base_uris: Sequence[str],
        *,
        fetcher: Fetcher | None,
        logger: logging.Logger,
    ) -> None:
        self._base_uris = list(base_uris)
        self._fetcher = fetcher
        self._logger = logger
        self._expanded_documents: dict[str, Any] = {}
        self._in_progress: set[str] = set()

    def expand_root(self, schema: Any) -> Any:
        return self._expand(schema, root=schema, root_uri="#", seen=frozenset())

    def _expand(self, node: Any, *, root: Any, root_uri: str, seen: frozenset[str]) -> Any:
        if isinstance(node, Mapping):
            ref = node.get("$ref")
            if isinstance(ref, str):
                target = self._resolve(ref, root=root, root_uri=root_uri, seen=seen)
                siblings = {
                    key: self._expand(value, root=root, root_uri=root_uri, seen=seen)
                    for key, value in node.items()
                    if key != "$ref"
                }
                if siblings and isinstance(target, Mapping):
                    return {**target, **siblings}
                return target
            return {
                key: self._expand(value, root=root, root_uri=root_uri, seen=seen)
                for key, value in node.items()
            }
        if isinstance(node, list):
            return [self._expand(item, root=root, root_uri=root_uri, seen=seen) for item in node]
        return node

    def _resolve(self, ref: str, *, root: Any, root_uri: str, seen: frozenset[str]) -> Any:
        document_ref, _, pointer = ref.partition("#")
        if not document_ref:
            key = f"{root_uri}#{pointer}"
            if key in seen:
                raise CircularReferenceError(f"Circular $ref {ref} in {root_uri}")
            target = self._follow_pointer(root, pointer, ref, root_uri)
            return self._expand(target, root=root, root_uri=root_uri, seen=seen | {key})

        document = self._expanded_document(document_ref)
        return copy.deepcopy(self._follow_pointer(document, pointer, ref, document_ref))

    def _expanded_document(self, document_ref: str) -> Any:
        if document_ref in self._expanded_documents:
            return self._expanded_documents[document_ref]
        if document_ref in self._in_progress:
            raise CircularReferenceError(f"Circular $ref to {document_ref}")
        self._in_progress.add(document_ref)
        try:
            _, raw_document = resolve_reference(
                document_ref, self._base_uris, fetcher=self._fetcher, logger=self._logger
            )
            expanded = self._expand(
                raw_document, root=raw_document, root_uri=document_ref, seen=frozenset()
            )
        finally:
            self._in_progress.discard(document_ref)
        self._expanded_documents[document_ref] = expanded
        return expanded

    @staticmethod
    def _follow_pointer(document: Any, pointer: str, ref: str, document_uri: str) -> Any:
        try:
            return resolve_json_pointer(document, pointer)
        except KeyError as exc:
            raise ResolutionError(
                ref, [f"{document_uri}#{pointer}"], ["JSON pointer not found"]
            ) from exc
