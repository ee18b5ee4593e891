"""Shared fixtures: a throwaway copy of the fixture schema repository."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pytest
from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.serialization import read_object, write_object
from versioned_schema_tools.versioning import parse_semver

FIXTURE_SCHEMAS = Path(__file__).resolve().parent / "fixtures" / "schemas"


def _complete_older_versions(schema_base_path: Path) -> None:
    """Give the hand written older yaml versions their json twin and version symlink."""
    for yaml_path in sorted(schema_base_path.rglob("*.yaml")):
        if parse_semver(yaml_path.stem) is None:
            continue
        write_object(read_object(yaml_path), yaml_path.with_suffix(".json"), "json")
        (yaml_path.parent / yaml_path.stem).symlink_to(yaml_path.name)


@pytest.fixture
def schema_repository(tmp_path: Path) -> Path:
    """Copy of tests/fixtures/schemas with complete older versions, nothing materialized."""
    schema_base_path = tmp_path / "schemas"
    shutil.copytree(FIXTURE_SCHEMAS, schema_base_path)
    _complete_older_versions(schema_base_path)
    return schema_base_path


@pytest.fixture
def repository_options(schema_repository: Path) -> ToolOptions:
    return ToolOptions(schema_base_path=schema_repository, parallelism=2)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by configure_logging during CLI invocations."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
