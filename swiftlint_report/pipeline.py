"""Report orchestration: probe, acquire, filter, link, render, publish."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from swiftlint_report.config import ReportConfiguration
from swiftlint_report.errors import LinterNotInstalled, SwiftLintReportError
from swiftlint_report.findings import Finding, parse_findings
from swiftlint_report.output import IssueRow, render_markdown_table
from swiftlint_report.paths import RepoContext, issue_label, to_repo_relative_path
from swiftlint_report.report_source import ReportSource, is_linter_installed
from swiftlint_report.review_context import ReviewContext
from swiftlint_report.severity_filter import filter_findings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReportOutcome:
    """Result of one ``report`` call."""

    markdown: str | None = None
    error: str | None = None
    issue_count: int = 0

    @property
    def published(self) -> bool:
        return self.markdown is not None

    @property
    def failed(self) -> bool:
        return self.error is not None


class SwiftLintReporter:
    """Surface a SwiftLint JSON report as a markdown table on a code review.

    Mutate ``config`` between calls to change which severities are shown or
    the emoji used for each of them.
    """

    def __init__(
        self,
        context: ReviewContext,
        config: ReportConfiguration | None = None,
        *,
        source: ReportSource | None = None,
        working_root: Path | str | None = None,
    ) -> None:
        self.context = context
        self.config = config or ReportConfiguration()
        self.source = source or ReportSource()
        self.working_root = str(working_root) if working_root is not None else None

    def report(self, path: Path | str | None = None) -> ReportOutcome:
        """Lint an existing report at ``path``, or generate one, and publish it.

        Does nothing when there are no enabled findings. Failures are reported
        through the review context instead of being raised.
        """
        try:
            return self._report(path)
        except SwiftLintReportError as error:
            message = str(error)
            logger.error("SwiftLint report failed: %s", message)
            self._mark_failed(message)
            return ReportOutcome(error=message)

    def _mark_failed(self, message: str) -> None:
        """Report the failure to the review; the outcome carries it either way."""
        try:
            self.context.fail(message)
        except Exception:
            logger.warning("Could not mark the review as failed.", exc_info=True)

    def _report(self, path: Path | str | None) -> ReportOutcome:
        linter = self.source.linter
        if not is_linter_installed(linter):
            raise LinterNotInstalled(f"{linter} is not in the user's PATH, or it failed to install")

        raw_findings = self.source.obtain(path)
        if not raw_findings:
            logger.info("SwiftLint report is empty; nothing to publish.")
            return ReportOutcome()

        findings = parse_findings(raw_findings)
        unknown = [finding for finding in findings if not finding.is_known_severity]
        if unknown:
            logger.debug(
                "%d finding(s) have unknown severities: %s",
                len(unknown),
                ", ".join(sorted({repr(finding.severity) for finding in unknown})),
            )
        enabled = list(filter_findings(findings, self.config.enabled_types))
        logger.info("%d of %d findings have an enabled severity.", len(enabled), len(findings))
        if not enabled:
            return ReportOutcome()

        repo = RepoContext.from_review_context(self.context, self._resolve_working_root())
        rows = [self._build_row(finding, repo) for finding in enabled]

        markdown = render_markdown_table(rows)
        if not markdown:
            return ReportOutcome()

        self.context.publish_markdown(markdown)
        logger.info("Published SwiftLint report with %d issue(s).", len(rows))
        return ReportOutcome(markdown=markdown, issue_count=len(rows))

    def _resolve_working_root(self) -> str:
        if self.working_root is not None:
            return self.working_root
        return os.getcwd()

    def _build_row(self, finding: Finding, repo: RepoContext) -> IssueRow:
        relative_path = to_repo_relative_path(finding.file, repo.working_root)
        return IssueRow(
            emoji=self.config.emoji_for(finding.severity),
            link=repo.issue_link(relative_path, finding.line),
            label=issue_label(relative_path, finding.line),
            reason=finding.reason,
        )
