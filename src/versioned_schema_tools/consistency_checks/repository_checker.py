"""Repository wide consistency checking."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from versioned_schema_tools.configuration import ToolOptions
from versioned_schema_tools.dereferencing import Fetcher
from versioned_schema_tools.repository_scanning import (
    find_all_schemas_info,
    group_schemas_by_title,
    group_schemas_by_title_and_major,
)

from .check_outcomes import RuleResult, RuleStatus
from .compatibility_rules import COMPATIBILITY_SUITE, check_compatibility
from .robustness_rules import ROBUSTNESS_SUITE, check_robustness
from .structure_rules import STRUCTURE_SUITE, check_structure

_LOGGER = logging.getLogger(__name__)

CHECK_SUITES: tuple[str, ...] = (STRUCTURE_SUITE, ROBUSTNESS_SUITE, COMPATIBILITY_SUITE)


class UnknownSuiteError(ValueError):
    """Raised when an unknown check suite is requested."""


def check_repository(
    options: ToolOptions,
    *,
    suites: Sequence[str] = CHECK_SUITES,
    fetcher: Fetcher | None = None,
) -> list[RuleResult]:
    """Scan the repository once and evaluate the requested rule suites against it."""
    unknown = [suite for suite in suites if suite not in CHECK_SUITES]
    if unknown:
        raise UnknownSuiteError(
            f"Unknown check suite(s) {', '.join(unknown)}; "
            f"expected one of {', '.join(CHECK_SUITES)}"
        )

    _LOGGER.info("Checking schema repository %s", options.schema_base_path)
    schema_infos = find_all_schemas_info(options)
    results: list[RuleResult] = []
    if STRUCTURE_SUITE in suites:
        results.extend(
            check_structure(group_schemas_by_title(schema_infos), options, fetcher=fetcher)
        )
    if ROBUSTNESS_SUITE in suites:
        results.extend(check_robustness(schema_infos, options))
    if COMPATIBILITY_SUITE in suites:
        results.extend(check_compatibility(group_schemas_by_title_and_major(schema_infos), options))

    _LOGGER.info(
        "Evaluated %d rules: %d failed, %d skipped",
        len(results),
        sum(1 for result in results if result.status is RuleStatus.FAILED),
        sum(1 for result in results if result.status is RuleStatus.SKIPPED),
    )
    return results
