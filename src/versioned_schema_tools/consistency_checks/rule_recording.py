"""Isolated evaluation of rules into RuleResults, honouring skip_schema_test_cases."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping

from .check_outcomes import RuleResult, RuleViolation

_LOGGER = logging.getLogger(__name__)


def skipped_rule_names(
    schema_id: str, skip_schema_test_cases: Mapping[str, Iterable[str]]
) -> set[str]:
    """Return the rule names configured to be skipped for schemas with schema_id."""
    return {
        rule
        for pattern, rules in skip_schema_test_cases.items()
        if re.search(pattern, schema_id or "")
        for rule in rules
    }


class RuleRecorder:
    """Evaluates rules one at a time and collects their results for a suite."""

    def __init__(self, suite: str, skip_schema_test_cases: Mapping[str, Iterable[str]]):
        self.suite = suite
        self._skip_schema_test_cases = skip_schema_test_cases
        self.results: list[RuleResult] = []

    def evaluate(
        self,
        subject: str,
        rule: str,
        check: Callable[[], None],
        *,
        schema_id: str = "",
    ) -> RuleResult:
        """Run check, recording PASSED, FAILED on RuleViolation or any error, or SKIPPED."""
        if rule in skipped_rule_names(schema_id, self._skip_schema_test_cases):
            result = RuleResult.skipped(self.suite, subject, rule)
        else:
            try:
                check()
                result = RuleResult.passed(self.suite, subject, rule)
            except RuleViolation as violation:
                result = RuleResult.violated(self.suite, subject, rule, violation)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                result = RuleResult.violated(
                    self.suite, subject, rule, RuleViolation(f"{type(exc).__name__}: {exc}")
                )
        if result.failed:
            _LOGGER.debug("%s: %s %s failed: %s", self.suite, subject, rule, result.message)
        self.results.append(result)
        return result


def assert_rule(
    condition: object, message: str, *, expected: object = None, actual: object = None
) -> None:
    """Raise RuleViolation with message unless condition holds."""
    if not condition:
        raise RuleViolation(message, expected=expected, actual=actual)


def assert_no_violations(messages: list[str], summary: str) -> None:
    """Raise RuleViolation listing messages when there are any."""
    if messages:
        raise RuleViolation(f"{summary}: {'; '.join(messages)}", expected=[], actual=messages)
