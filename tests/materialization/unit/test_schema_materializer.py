"""Schema materializer tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
from versioned_schema_tools.configuration import MAX_SAFE_INTEGER, ToolOptions
from versioned_schema_tools.materialization import (
    MaterializationError,
    materialize_modified_schemas,
    materialize_schema,
    materialize_schema_file,
    materialize_schema_to_path,
)
from versioned_schema_tools.serialization import read_object


def _schema(version: str) -> dict:
    return {
        "title": "basic",
        "$id": f"/basic/{version}",
        "type": "object",
        "properties": {"count": {"type": "integer", "minimum": 0}},
    }


class _FakeGit:
    def __init__(self, modified: list[Path]):
        self.modified = modified
        self.added: list[Path] = []
        self.staged_flags: list[bool] = []

    def modified_paths(self, *, staged: bool, current_name: str) -> list[Path]:
        self.staged_flags.append(staged)
        return [path for path in self.modified if path.name == current_name]

    def add(self, paths) -> None:
        self.added.extend(paths)


def test_materializes_every_content_type_and_version_symlink(tmp_path: Path) -> None:
    options = ToolOptions(schema_base_path=tmp_path)

    written = materialize_schema_to_path(tmp_path / "basic", _schema("1.2.0"), options)

    directory = tmp_path / "basic"
    assert written == [
        directory / "1.2.0.yaml",
        directory / "latest.yaml",
        directory / "1.2.0",
        directory / "latest",
        directory / "1.2.0.json",
        directory / "latest.json",
    ]
    assert os.readlink(directory / "1.2.0") == "1.2.0.yaml"
    assert os.readlink(directory / "latest") == "latest.yaml"
    assert os.readlink(directory / "latest.json") == "1.2.0.json"
    assert json.loads((directory / "1.2.0.json").read_text(encoding="utf-8")) == read_object(
        directory / "1.2.0.yaml"
    )


def test_materialized_schema_gets_numeric_bounds(tmp_path: Path) -> None:
    materialized = materialize_schema(_schema("1.0.0"), ToolOptions(schema_base_path=tmp_path))

    assert materialized["properties"]["count"] == {
        "type": "integer",
        "minimum": 0,
        "maximum": MAX_SAFE_INTEGER,
    }


def test_disabled_steps_leave_schema_as_is(tmp_path: Path) -> None:
    options = ToolOptions(
        schema_base_path=tmp_path, should_dereference=False, enforced_numeric_bounds=None
    )
    schema = {**_schema("1.0.0"), "allOf": [{"$ref": "/missing/1.0.0"}]}

    assert materialize_schema(schema, options) == schema


def test_symlinks_can_be_disabled(tmp_path: Path) -> None:
    options = ToolOptions(
        schema_base_path=tmp_path,
        content_types=("json",),
        should_symlink_extensionless=False,
        should_symlink_latest=False,
    )

    written = materialize_schema_to_path(tmp_path, _schema("1.0.0"), options)

    assert written == [tmp_path / "1.0.0.json"]
    assert sorted(path.name for path in tmp_path.iterdir()) == ["1.0.0.json"]


def test_older_version_does_not_move_latest(tmp_path: Path) -> None:
    options = ToolOptions(schema_base_path=tmp_path)

    materialize_schema_to_path(tmp_path, _schema("2.0.0"), options)
    written = materialize_schema_to_path(tmp_path, _schema("1.5.0"), options)

    assert os.readlink(tmp_path / "latest.yaml") == "2.0.0.yaml"
    assert os.readlink(tmp_path / "1.5.0") == "1.5.0.yaml"
    assert tmp_path / "latest.yaml" not in written


def test_dangling_latest_is_replaced(tmp_path: Path) -> None:
    (tmp_path / "latest.yaml").symlink_to("9.9.9.yaml")

    materialize_schema_to_path(tmp_path, _schema("1.0.0"), ToolOptions(schema_base_path=tmp_path))

    assert os.readlink(tmp_path / "latest.yaml") == "1.0.0.yaml"


def test_materializing_twice_is_idempotent(tmp_path: Path) -> None:
    options = ToolOptions(schema_base_path=tmp_path)

    materialize_schema_to_path(tmp_path, _schema("1.0.0"), options)
    first = {path.name: path.read_bytes() for path in tmp_path.iterdir()}
    materialize_schema_to_path(tmp_path, _schema("1.0.0"), options)
    second = {path.name: path.read_bytes() for path in tmp_path.iterdir()}

    assert first == second


def test_dry_run_reports_paths_without_writing(tmp_path: Path) -> None:
    options = ToolOptions(schema_base_path=tmp_path, dry_run=True)

    written = materialize_schema_to_path(tmp_path / "basic", _schema("1.0.0"), options)

    assert tmp_path / "basic" / "1.0.0.yaml" in written
    assert not (tmp_path / "basic").exists()


def test_materialize_schema_file_wraps_failures(tmp_path: Path) -> None:
    schema_path = tmp_path / "current.yaml"
    schema_path.write_text("title: no version\ntype: object\n", encoding="utf-8")

    with pytest.raises(MaterializationError, match="current.yaml") as excinfo:
        materialize_schema_file(schema_path, ToolOptions(schema_base_path=tmp_path))

    assert "$id" in str(excinfo.value.cause)


def test_materialize_schema_file_into_output_dir(tmp_path: Path) -> None:
    schema_path = tmp_path / "current.yaml"
    schema_path.write_text("title: basic\n$id: /basic/3.0.0\n", encoding="utf-8")
    options = ToolOptions(schema_base_path=tmp_path, content_types=("json",))

    written = materialize_schema_file(schema_path, options, output_dir=tmp_path / "out")

    assert (tmp_path / "out" / "3.0.0.json") in written
    assert not (tmp_path / "3.0.0.json").exists()


def test_materialize_modified_orders_dependencies_first_and_stages_output(
    repository_options: ToolOptions,
) -> None:
    base = repository_options.schema_base_path
    git = _FakeGit(
        [base / "basic" / "current.yaml", base / "README.md", base / "common" / "current.yaml"]
    )
    options = repository_options.with_overrides(git_staged=True)

    materialized = materialize_modified_schemas(options, git=git)

    assert git.staged_flags == [True]
    assert materialized[0] == base / "common" / "1.0.0.yaml"
    assert base / "basic" / "1.2.0.json" in materialized
    assert git.added == materialized


def test_materialize_modified_without_changes_does_nothing(repository_options: ToolOptions) -> None:
    git = _FakeGit([])

    assert materialize_modified_schemas(repository_options, git=git) == []
    assert git.added == []


def test_materialize_modified_dry_run_does_not_stage(repository_options: ToolOptions) -> None:
    base = repository_options.schema_base_path
    git = _FakeGit([base / "common" / "current.yaml"])

    options = repository_options.with_overrides(dry_run=True)

    materialized = materialize_modified_schemas(options, git=git)

    assert base / "common" / "1.0.0.yaml" in materialized
    assert git.added == []
    assert not (base / "common" / "1.0.0.yaml").exists()
