"""Repository wide checks of the materialized fixture repository."""

from __future__ import annotations

import json

import pytest
from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.consistency_checks import (
    CHECK_SUITES,
    RuleStatus,
    UnknownSuiteError,
    check_repository,
)
from versioned_schema_tools.materialization import materialize_all_schemas


@pytest.fixture
def materialized_options(repository_options: ToolOptions) -> ToolOptions:
    materialize_all_schemas(repository_options)
    return repository_options


def test_materialized_repository_passes_every_suite(materialized_options: ToolOptions) -> None:
    results = check_repository(materialized_options)

    failed = [result for result in results if result.failed]
    assert failed == []
    assert {result.suite for result in results} == set(CHECK_SUITES)
    assert any(
        result.subject == "basic 1.2.0 compatible with 1.1.0" and result.status is RuleStatus.PASSED
        for result in results
    )


def test_tampered_materialized_file_fails(materialized_options: ToolOptions) -> None:
    json_path = materialized_options.schema_base_path / "basic" / "1.2.0.json"
    schema = json.loads(json_path.read_text(encoding="utf-8"))
    schema["properties"]["testEnum"] = schema["properties"].pop("test_enum")
    json_path.write_text(json.dumps(schema, indent=2), encoding="utf-8")

    failed = {
        (result.suite, result.subject, result.rule)
        for result in check_repository(materialized_options)
        if result.failed
    }

    assert ("robustness", "basic/1.2.0.json", "snake-case-properties") in failed
    assert ("structure", "basic 1.2.0", "content-types-equal") in failed


def test_suites_can_be_selected(materialized_options: ToolOptions) -> None:
    results = check_repository(materialized_options, suites=("compatibility",))

    assert {result.suite for result in results} == {"compatibility"}


def test_unknown_suite_is_rejected(materialized_options: ToolOptions) -> None:
    with pytest.raises(UnknownSuiteError, match="linting"):
        check_repository(materialized_options, suites=("linting",))


def test_skip_list_turns_failures_into_skips(materialized_options: ToolOptions) -> None:
    json_path = materialized_options.schema_base_path / "basic" / "1.2.0.json"
    schema = json.loads(json_path.read_text(encoding="utf-8"))
    schema["properties"]["testEnum"] = {"type": "string"}
    json_path.write_text(json.dumps(schema), encoding="utf-8")
    options = materialized_options.with_overrides(
        skip_schema_test_cases={"^/basic/1.2.0$": ("snake-case-properties", "content-types-equal")}
    )

    results = check_repository(options, suites=("structure", "robustness"))

    assert [result for result in results if result.failed] == []
    assert sum(1 for result in results if result.status is RuleStatus.SKIPPED) >= 2
