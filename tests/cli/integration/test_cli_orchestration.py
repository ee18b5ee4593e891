"""CLI orchestration integration tests."""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from pathlib import Path
from xml.etree import ElementTree as ET

import pytest
from click.testing import CliRunner
from versioned_schema_tools.cli import cli, main

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

PIPED_SCHEMA = """
title: piped
$id: /piped/2.1.0
type: object
properties:
  count:
    type: integer
"""


def _git(repository: Path, *args: str) -> str:
    completed = subprocess.run(
        ["git", *args], cwd=repository, check=True, capture_output=True, text=True
    )
    return completed.stdout


def test_materialize_all_then_check_passes(schema_repository: Path, tmp_path: Path) -> None:
    runner = CliRunner()
    junit_path = tmp_path / "reports" / "checks.xml"

    materialized = runner.invoke(
        cli, ["materialize-all", "--schema-base-path", str(schema_repository)]
    )
    checked = runner.invoke(
        cli,
        ["check", "--schema-base-path", str(schema_repository), "--junit-xml", str(junit_path)],
    )

    assert materialized.exit_code == 0, materialized.output
    assert str(schema_repository / "basic" / "1.2.0.json") in materialized.stdout
    assert checked.exit_code == 0, checked.output
    assert " 0 failed" in checked.stdout
    assert ET.parse(junit_path).getroot().get("failures") == "0"


def test_check_reports_unmaterialized_repository(schema_repository: Path, capsys) -> None:
    exit_code = main(
        ["check", "--schema-base-path", str(schema_repository), "--suite", "structure"]
    )
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "FAILED [structure] common: has-latest-version" in captured.out
    assert "FAILED [structure] basic: latest-version-is-current" in captured.out
    assert "schema repository rule(s) failed." in captured.err


def test_dry_run_materialize_all_writes_nothing(schema_repository: Path) -> None:
    runner = CliRunner()
    runner.invoke(
        cli,
        ["materialize", str(schema_repository / "common" / "current.yaml"),
         "--schema-base-path", str(schema_repository)],
    )
    before = sorted(str(path) for path in schema_repository.rglob("*"))

    result = runner.invoke(
        cli, ["materialize-all", "--schema-base-path", str(schema_repository), "--dry-run"]
    )

    assert result.exit_code == 0, result.output
    assert str(schema_repository / "basic" / "1.2.0.yaml") in result.stdout
    assert sorted(str(path) for path in schema_repository.rglob("*")) == before


def test_dereference_prints_primary_content_type(schema_repository: Path) -> None:
    runner = CliRunner()
    runner.invoke(
        cli,
        ["materialize", str(schema_repository / "common" / "current.yaml"),
         "--schema-base-path", str(schema_repository)],
    )

    result = runner.invoke(
        cli,
        [
            "dereference",
            str(schema_repository / "basic" / "current.yaml"),
            "--schema-base-path",
            str(schema_repository),
            "--content-type",
            "json",
        ],
    )

    assert result.exit_code == 0, result.output
    dereferenced = json.loads(result.stdout)
    assert "allOf" not in dereferenced
    assert "dt" in dereferenced["properties"]
    assert "maximum" not in dereferenced["properties"]["test_integer"]


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_dereference_reads_schema_from_stdin(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        ["dereference", "-", "--schema-base-path", str(tmp_path), "--content-type", "json"],
        input=PIPED_SCHEMA,
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["$id"] == "/piped/2.1.0"


@pytest.mark.filterwarnings("error::DeprecationWarning")
def test_materialize_from_stdin_into_output_dir(tmp_path: Path) -> None:
    runner = CliRunner()
    output_dir = tmp_path / "out"

    result = runner.invoke(
        cli,
        [
            "materialize",
            "-",
            "--output-dir",
            str(output_dir),
            "--schema-base-path",
            str(tmp_path),
            "--content-type",
            "json",
            "--no-symlink",
            "--no-symlink-latest",
        ],
        input=PIPED_SCHEMA,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == str(output_dir / "2.1.0.json")
    materialized = json.loads((output_dir / "2.1.0.json").read_text(encoding="utf-8"))
    assert materialized["properties"]["count"]["minimum"] == -9007199254740991


def test_config_file_drives_materialization(schema_repository: Path, tmp_path: Path) -> None:
    config_path = tmp_path / ".jsonschema-tools.yaml"
    config_path.write_text(
        f"schemaBasePath: {schema_repository}\ncontentTypes: [json]\nshouldSymlinkLatest: false\n",
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(cli, ["materialize-all", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert (schema_repository / "basic" / "1.2.0.json").exists()
    assert not (schema_repository / "basic" / "1.2.0.yaml").exists()
    assert os.readlink(schema_repository / "basic" / "1.2.0") == "1.2.0.json"
    assert not (schema_repository / "basic" / "latest").exists()


def test_generate_config_command_writes_scaffold(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "generated.yaml"

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == str(output_path.resolve())
    assert "schema_base_path:" in output_path.read_text(encoding="utf-8")


@requires_git
def test_materialize_modified_stages_materialized_files(schema_repository: Path) -> None:
    _git(schema_repository, "init", "--quiet")
    _git(schema_repository, "add", "common/current.yaml", "basic/current.yaml")
    runner = CliRunner()

    result = runner.invoke(
        cli, ["materialize-modified", "--staged", "--schema-base-path", str(schema_repository)]
    )

    assert result.exit_code == 0, result.output
    staged = _git(schema_repository, "diff", "--cached", "--name-only").split()
    assert "common/1.0.0.yaml" in staged
    assert "basic/1.2.0.json" in staged
    assert "basic/latest" in staged


@requires_git
def test_install_git_hook_writes_pre_commit_hook(schema_repository: Path) -> None:
    _git(schema_repository, "init", "--quiet")
    runner = CliRunner()

    result = runner.invoke(cli, ["install-git-hook", "--schema-base-path", str(schema_repository)])

    assert result.exit_code == 0, result.output
    hook_path = Path(result.stdout.strip())
    assert hook_path.name == "pre-commit"
    assert "materialize-modified --staged" in hook_path.read_text(encoding="utf-8")
