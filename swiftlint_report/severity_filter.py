"""Severity filtering for findings."""

from __future__ import annotations

from collections.abc import Collection, Iterable, Iterator

from swiftlint_report.findings import Finding


def is_enabled(severity_tag: str, enabled_types: Collection[str]) -> bool:
    """Return whether a normalized severity tag is in the enabled set."""
    return severity_tag in enabled_types


def filter_findings(
    findings: Iterable[Finding], enabled_types: Collection[str]
) -> Iterator[Finding]:
    """Yield findings with an enabled severity, keeping report order."""
    for finding in findings:
        if is_enabled(finding.severity, enabled_types):
            yield finding
