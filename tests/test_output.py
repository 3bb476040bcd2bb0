"""Markdown table rendering tests."""

from __future__ import annotations

import pytest
from swiftlint_report.output import IssueRow, render_markdown_table


def make_row(emoji: str = "⚠", line: int = 1, reason: str = "Trailing whitespace.") -> IssueRow:
    return IssueRow(
        emoji=emoji,
        link=f"https://github.com/acme/rocket/tree/abc/App.swift#L{line}",
        label=f"/App.swift (line {line})",
        reason=reason,
    )


@pytest.mark.unit
def test_render_markdown_table_empty_rows_render_nothing() -> None:
    assert render_markdown_table([]) == ""


@pytest.mark.unit
def test_render_markdown_table_layout() -> None:
    markdown = render_markdown_table([make_row("⚠", 3), make_row("❌", 1)])

    lines = markdown.splitlines()
    assert lines[:4] == [
        "### SwiftLint found issues",
        "",
        "| Severity | File | Message |",
        "|----------|------|---------|",
    ]
    assert lines[4:] == [
        "| ⚠ | [/App.swift (line 3)](https://github.com/acme/rocket/tree/abc/App.swift#L3) "
        "| Trailing whitespace. |",
        "| ❌ | [/App.swift (line 1)](https://github.com/acme/rocket/tree/abc/App.swift#L1) "
        "| Trailing whitespace. |",
    ]
    assert markdown.endswith("\n")


@pytest.mark.unit
def test_render_markdown_table_custom_heading() -> None:
    markdown = render_markdown_table([make_row()], heading="Lint findings")

    assert markdown.startswith("### Lint findings\n\n")


@pytest.mark.unit
def test_render_markdown_table_escapes_cell_breaking_characters() -> None:
    markdown = render_markdown_table([make_row(reason="Use a | b\ninstead")])

    assert markdown.splitlines()[4].endswith("| Use a \\| b instead |")
