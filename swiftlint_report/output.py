"""Markdown table rendering for PR comments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

DEFAULT_HEADING = "SwiftLint found issues"
TABLE_HEADER = "| Severity | File | Message |"
TABLE_SEPARATOR = "|----------|------|---------|"


@dataclass(frozen=True, slots=True)
class IssueRow:
    """One rendered table row."""

    emoji: str
    link: str
    label: str
    reason: str


def _escape_cell(text: str) -> str:
    """Keep a message inside its table cell."""
    return " ".join(text.splitlines()).replace("|", "\\|")


def render_issue_row(row: IssueRow) -> str:
    """Render a single table row."""
    return f"| {row.emoji} | [{row.label}]({row.link}) | {_escape_cell(row.reason)} |"


def render_markdown_table(rows: Sequence[IssueRow], *, heading: str = DEFAULT_HEADING) -> str:
    """Render rows as a headed markdown table, or an empty string for no rows."""
    if not rows:
        return ""

    lines = [f"### {heading}", "", TABLE_HEADER, TABLE_SEPARATOR]
    lines.extend(render_issue_row(row) for row in rows)
    return "\n".join(lines) + "\n"
