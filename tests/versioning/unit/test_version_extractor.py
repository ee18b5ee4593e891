"""Version extraction tests."""

from __future__ import annotations

import pytest
from versioned_schema_tools.versioning import (
    SemVer,
    VersionError,
    coerce_semver,
    extract_version,
    get_field,
    parse_semver,
)


def test_extract_version_reads_last_id_segment() -> None:
    assert extract_version({"$id": "/basic/1.2.0"}) == SemVer(1, 2, 0)


def test_extract_version_reads_nested_field_path() -> None:
    schema = {"info": {"versions": ["ignored", "v2.1"]}}

    assert extract_version(schema, "info.versions[1]") == SemVer(2, 1, 0)


def test_extract_version_zero_pads_partial_versions() -> None:
    assert extract_version({"$id": "https://schema.example.org/event/3"}) == SemVer(3, 0, 0)


@pytest.mark.parametrize(
    "schema",
    [{}, {"$id": "/basic/latest"}, {"$id": {"nested": "1.0.0"}}],
)
def test_extract_version_raises_version_error(schema: dict) -> None:
    with pytest.raises(VersionError):
        extract_version(schema)


def test_parse_semver_is_strict() -> None:
    assert parse_semver("1.10.0") == SemVer(1, 10, 0)
    assert parse_semver("1.0.0-beta.1+build5") == SemVer(1, 0, 0)
    assert parse_semver("1.0") is None
    assert parse_semver("latest") is None
    assert parse_semver("01.0.0") is None


def test_coerce_semver_uses_first_digit_run() -> None:
    assert coerce_semver("release-1.4") == SemVer(1, 4, 0)
    assert coerce_semver("no digits") is None


def test_semver_orders_numerically_and_renders_dotted() -> None:
    assert SemVer(1, 10, 0) > SemVer(1, 9, 9)
    assert str(SemVer(1, 2, 3)) == "1.2.3"


def test_get_field_prefers_literal_key_over_path() -> None:
    document = {"a.b": "literal", "a": {"b": "nested"}}

    assert get_field(document, "a.b") == "literal"
    assert get_field({"a": {"b": "nested"}}, "a.b") == "nested"
    assert get_field({"a": []}, "a[0]", default="missing") == "missing"
