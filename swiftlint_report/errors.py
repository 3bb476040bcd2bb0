"""Error kinds raised while producing a SwiftLint report."""

from __future__ import annotations


class SwiftLintReportError(RuntimeError):
    """Base error for failures that end one report run."""


class LinterNotInstalled(SwiftLintReportError):
    """Raised when the linter binary cannot be found on PATH."""


class ReportUnavailable(SwiftLintReportError):
    """Raised when the JSON report is missing, unreadable, or malformed."""


class PathResolutionError(SwiftLintReportError):
    """Raised when a finding path does not contain the working root."""

    def __init__(self, message: str, *, path: str, working_root: str) -> None:
        super().__init__(message)
        self.path = path
        self.working_root = working_root


class UnsupportedReviewHost(SwiftLintReportError):
    """Raised when the review context is not hosted on GitHub."""


class ReportConfigurationError(SwiftLintReportError):
    """Raised when report configuration values are invalid."""


class MissingIssueEmoji(ReportConfigurationError):
    """Raised when an enabled severity has no emoji marker."""

    def __init__(self, message: str, *, severity: str) -> None:
        super().__init__(message)
        self.severity = severity
