"""Resolution of schema $ref URIs against an ordered list of base URIs."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from itertools import zip_longest
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

import requests

from versioned_schema_tools.serialization import SerializationError, parse_object

_LOGGER = logging.getLogger(__name__)

# https://tools.ietf.org/html/rfc3986#section-3.1
_URI_SCHEME_PATTERN = re.compile(r"^[a-zA-Z0-9+.-]+://")

DEFAULT_FETCH_TIMEOUT_SECONDS = 30

Fetcher = Callable[[str], str]


class ResolutionError(Exception):
    """Raised when no base URI could resolve a $ref."""

    def __init__(self, ref: str, attempted_uris: Sequence[str], reasons: Sequence[str] = ()):
        self.ref = ref
        self.attempted_uris = tuple(attempted_uris)
        self.reasons = tuple(reasons)
        details = "; ".join(
            f"{uri} ({reason})" if reason else uri
            for uri, reason in zip_longest(self.attempted_uris, self.reasons, fillvalue="")
        )
        super().__init__(f"Could not resolve $ref {ref}. Attempted: {details}")


def uri_has_scheme(uri: str) -> bool:
    """Return True if uri starts with a scheme such as file:// or https://."""
    return bool(_URI_SCHEME_PATTERN.match(uri))


def build_candidate_uri(ref: str, base_uri: str | None) -> str:
    """Qualify ref with base_uri, defaulting to an absolute file:// URI."""
    uri = ref
    if base_uri and not uri_has_scheme(uri):
        uri = f"{base_uri}{uri}"
    if not uri_has_scheme(uri):
        uri = Path(uri).resolve().as_uri()
    return uri


def fetch_uri_text(uri: str, *, timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS) -> str:
    """Read the text behind a file:// or http(s):// URI."""
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path)).read_text(encoding="utf-8")
    if parsed.scheme in ("http", "https"):
        return fetch_remote_text(uri, timeout=timeout)
    raise ValueError(f"Unsupported URI scheme '{parsed.scheme}' in {uri}")


def fetch_remote_text(url: str, *, timeout: float = DEFAULT_FETCH_TIMEOUT_SECONDS) -> str:
    """Fetch text from an http(s) URL."""
    response = requests.get(url, timeout=timeout)
    response.raise_for_status()
    return response.text


def resolve_reference(
    ref: str,
    base_uris: Sequence[str],
    *,
    fetcher: Fetcher | None = None,
    logger: logging.Logger | None = None,
) -> tuple[str, Any]:
    """Resolve ref against base_uris in order and return (resolved_uri, document).

    Each base URI gets exactly one attempt; the first one that can be read and
    parsed wins.
    """
    log = logger or _LOGGER
    read = fetcher or fetch_uri_text
    attempted: list[str] = []
    reasons: list[str] = []
    for base_uri in base_uris or [""]:
        candidate = build_candidate_uri(ref, base_uri)
        attempted.append(candidate)
        try:
            document = parse_object(read(candidate), candidate)
        except (OSError, ValueError, requests.RequestException, SerializationError) as exc:
            log.debug("Could not read %s while resolving %s: %s", candidate, ref, exc)
            reasons.append(str(exc))
            continue
        log.debug("Resolved %s to %s", ref, candidate)
        return candidate, document
    raise ResolutionError(ref, attempted, reasons)


def get_schema_by_id(
    schema_id: str,
    base_uris: Sequence[str],
    *,
    fetcher: Fetcher | None = None,
) -> Any:
    """Return the schema with the given $id from the first base URI that has it."""
    _, document = resolve_reference(schema_id, base_uris, fetcher=fetcher)
    return document

