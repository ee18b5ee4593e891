"""Results writing domain exports."""

from .junit_report_writer import build_junit_report, write_junit_report

__all__ = [
    "build_junit_report",
    "write_junit_report",
]
