"""Consistency check domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RuleStatus(str, Enum):
    """Outcome status of one evaluated rule."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


class RuleViolation(AssertionError):
    """A violated repository rule, carrying what was expected and what was found."""

    def __init__(self, message: str, *, expected: Any = None, actual: Any = None):
        super().__init__(message)
        self.message = message
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class RuleResult:
    """Outcome of evaluating one rule against one subject.

    subject names what was checked, e.g. "basic 1.2.0.yaml" or "basic major 1".
    """

    suite: str
    subject: str
    rule: str
    status: RuleStatus
    message: str = ""
    expected: Any = None
    actual: Any = None

    @property
    def failed(self) -> bool:
        return self.status is RuleStatus.FAILED

    @staticmethod
    def passed(suite: str, subject: str, rule: str) -> RuleResult:
        return RuleResult(suite=suite, subject=subject, rule=rule, status=RuleStatus.PASSED)

    @staticmethod
    def violated(suite: str, subject: str, rule: str, violation: RuleViolation) -> RuleResult:
        return RuleResult(
            suite=suite,
            subject=subject,
            rule=rule,
            status=RuleStatus.FAILED,
            message=violation.message,
            expected=violation.expected,
            actual=violation.actual,
        )

    @staticmethod
    def skipped(suite: str, subject: str, rule: str) -> RuleResult:
        return RuleResult(
            suite=suite,
            subject=subject,
            rule=rule,
            status=RuleStatus.SKIPPED,
            message="skipped by skip_schema_test_cases",
        )
