"""Consistency checks domain exports."""

from .check_outcomes import RuleResult, RuleStatus, RuleViolation
from .compatibility_rules import (
    COMPATIBILITY_RULE,
    COMPATIBILITY_SUITE,
    FIELDS_ALLOWED_TO_CHANGE,
    assert_compatible,
    check_compatibility,
)
from .repository_checker import CHECK_SUITES, UnknownSuiteError, check_repository
from .robustness_rules import (
    ROBUSTNESS_SUITE,
    check_robustness,
    deterministic_type_violations,
    numeric_bounds_violations,
    required_property_violations,
    snake_case_violations,
)
from .rule_recording import RuleRecorder, skipped_rule_names
from .schema_validation import (
    SECURE_META_SCHEMA,
    check_schema_security,
    check_schema_validity,
    validate_instance,
)
from .structure_rules import STRUCTURE_SUITE, check_structure

__all__ = [
    "CHECK_SUITES",
    "COMPATIBILITY_RULE",
    "COMPATIBILITY_SUITE",
    "FIELDS_ALLOWED_TO_CHANGE",
    "ROBUSTNESS_SUITE",
    "RuleRecorder",
    "RuleResult",
    "RuleStatus",
    "RuleViolation",
    "SECURE_META_SCHEMA",
    "STRUCTURE_SUITE",
    "UnknownSuiteError",
    "assert_compatible",
    "check_compatibility",
    "check_repository",
    "check_robustness",
    "check_schema_security",
    "check_schema_validity",
    "check_structure",
    "deterministic_type_violations",
    "numeric_bounds_violations",
    "required_property_violations",
    "skipped_rule_names",
    "snake_case_violations",
    "validate_instance",
]
