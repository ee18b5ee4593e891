"""JUnit XML rendering of consistency check results."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

from versioned_schema_tools.consistency_checks import RuleResult, RuleStatus


def build_junit_report(results: Sequence[RuleResult]) -> ET.ElementTree:
    """Build a <testsuites> tree with one <testsuite> per suite in first-seen order."""
    root = ET.Element("testsuites", name="versioned-schema-tools")
    suites: dict[str, ET.Element] = {}
    for result in results:
        suite = suites.get(result.suite)
        if suite is None:
            suite = ET.SubElement(root, "testsuite", name=result.suite)
            suites[result.suite] = suite
        _append_testcase(suite, result)

    for name, suite in suites.items():
        suite_results = [result for result in results if result.suite == name]
        suite.set("tests", str(len(suite_results)))
        suite.set("failures", str(_count(suite_results, RuleStatus.FAILED)))
        suite.set("skipped", str(_count(suite_results, RuleStatus.SKIPPED)))
        suite.set("errors", "0")
    root.set("tests", str(len(results)))
    root.set("failures", str(_count(results, RuleStatus.FAILED)))
    root.set("skipped", str(_count(results, RuleStatus.SKIPPED)))

    tree = ET.ElementTree(root)
    ET.indent(tree)
    return tree


def write_junit_report(results: Sequence[RuleResult], output_path: Path | str) -> Path:
    """Write results as JUnit XML to output_path and return it."""
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    build_junit_report(results).write(destination, encoding="utf-8", xml_declaration=True)
    return destination


def _append_testcase(suite: ET.Element, result: RuleResult) -> None:
    testcase = ET.SubElement(suite, "testcase", classname=result.subject, name=result.rule)
    if result.status is RuleStatus.FAILED:
        failure = ET.SubElement(testcase, "failure", message=result.message)
        details = [result.message]
        if result.expected is not None or result.actual is not None:
            details.append(f"expected: {_render(result.expected)}")
            details.append(f"actual: {_render(result.actual)}")
        failure.text = "\n".join(details)
    elif result.status is RuleStatus.SKIPPED:
        ET.SubElement(testcase, "skipped", message=result.message)


def _render(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _count(results: Sequence[RuleResult], status: RuleStatus) -> int:
    return sum(1 for result in results if result.status is status)
