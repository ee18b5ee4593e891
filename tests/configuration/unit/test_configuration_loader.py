"""Configuration loader tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from versioned_schema_tools.configuration import (
    MAX_SAFE_INTEGER,
    MIN_SAFE_INTEGER,
    ConfigurationError,
    load_options,
)


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_missing_config_files_yield_defaults(tmp_path: Path) -> None:
    options = load_options(config_paths=[tmp_path / "absent.yaml"])

    assert options.content_types == ("yaml", "json")
    assert options.primary_content_type == "yaml"
    assert options.current_name == "current.yaml"
    assert options.schema_version_field == "$id"
    assert options.enforced_numeric_bounds == (MIN_SAFE_INTEGER, MAX_SAFE_INTEGER)
    assert options.should_dereference is True
    assert options.git_staged is False
    assert options.base_uris == (str(options.schema_base_path),)
    assert options.config_paths == (tmp_path / "absent.yaml",)


def test_loads_camel_case_keys_and_resolves_base_path_against_config_file(tmp_path: Path) -> None:
    config_dir = tmp_path / "repo"
    config_dir.mkdir()
    config_path = _write_file(
        config_dir / ".jsonschema-tools.yaml",
        """
schemaBasePath: jsonschema
schemaBaseUris:
  - https://schema.example.org/repo
contentTypes: [json]
shouldSymlinkLatest: false
enforcedNumericBounds: [-100, 100]
skipSchemaTestCases:
  "^/legacy/.*": [snake-case-properties]
""",
    )

    options = load_options(config_paths=[config_path])

    assert options.schema_base_path == (config_dir / "jsonschema").resolve()
    assert options.base_uris == ("https://schema.example.org/repo",)
    assert options.content_types == ("json",)
    assert options.should_symlink_latest is False
    assert options.enforced_numeric_bounds == (-100, 100)
    assert options.skip_schema_test_cases == {"^/legacy/.*": ("snake-case-properties",)}


def test_later_files_and_overrides_take_precedence(tmp_path: Path) -> None:
    first = _write_file(tmp_path / "first.yaml", "current_name: first.yaml\nparallelism: 2\n")
    second = _write_file(tmp_path / "second.yaml", "current_name: second.yaml\n")

    options = load_options(
        overrides={"parallelism": 8, "current_name": None, "dry_run": True},
        config_paths=[first, second],
    )

    assert options.current_name == "second.yaml"
    assert options.parallelism == 8
    assert options.dry_run is True


def test_comma_separated_content_types_are_accepted(tmp_path: Path) -> None:
    options = load_options(
        overrides={"content_types": "json, yaml"}, config_paths=[tmp_path / "none"]
    )

    assert options.content_types == ("json", "yaml")
    assert options.primary_content_type == "json"


def test_numeric_bounds_can_be_disabled(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "enforced_numeric_bounds: false\n")

    assert load_options(config_paths=[config_path]).enforced_numeric_bounds is None


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("content_types: [xml]\n", "not supported"),
        ("content_types: []\n", "at least one"),
        ("enforced_numeric_bounds: [10, -10]\n", "must not exceed"),
        ("enforced_numeric_bounds: [1]\n", "pair"),
        ("ignore_schemas: ['(unclosed']\n", "invalid regex"),
        ("should_dereference: 'yes'\n", "boolean"),
        ("parallelism: 0\n", "greater than zero"),
        ("log_level: loud\n", "log_level"),
        ("unknownOption: 1\n", "Unknown configuration option"),
        ("- not\n- a mapping\n", "must be a mapping"),
        ("key: [unclosed\n", "Failed to parse"),
    ],
)
def test_rejects_invalid_configuration(tmp_path: Path, contents: str, message: str) -> None:
    config_path = _write_file(tmp_path / "config.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_options(config_paths=[config_path])


def test_empty_config_file_is_ignored(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "config.yaml", "")

    assert load_options(config_paths=[config_path]).content_types == ("yaml", "json")
