"""Report configuration and environment loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from swiftlint_report.errors import MissingIssueEmoji, ReportConfigurationError
from swiftlint_report.findings import Severity

ENABLED_TYPES_ENV_VAR = "SWIFTLINT_ENABLED_TYPES"
ISSUE_EMOJI_ENV_VAR = "SWIFTLINT_ISSUE_EMOJI"
LOG_LEVEL_ENV_VAR = "SWIFTLINT_REPORT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _default_enabled_types() -> set[str]:
    return {Severity.WARNING, Severity.ERROR}


def _default_issue_emoji() -> dict[str, str]:
    return {Severity.WARNING: "⚠", Severity.ERROR: "❌"}


@dataclass(slots=True)
class ReportConfiguration:
    """Which severities are shown and the marker used for each one.

    Both fields may be reassigned or mutated between ``report`` calls.
    """

    enabled_types: set[str] = field(default_factory=_default_enabled_types)
    issue_emoji: dict[str, str] = field(default_factory=_default_issue_emoji)

    def emoji_for(self, severity: str) -> str:
        """Return the marker for a severity tag."""
        emoji = self.issue_emoji.get(severity)
        if not emoji:
            raise MissingIssueEmoji(
                f"No issue emoji configured for severity '{severity}'.",
                severity=severity,
            )
        return emoji

    @classmethod
    def from_env(cls) -> ReportConfiguration:
        """Build configuration from environment variables and a local .env file."""
        load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
        config = cls()

        enabled_value = os.getenv(ENABLED_TYPES_ENV_VAR)
        if enabled_value is not None:
            config.enabled_types = parse_enabled_types(enabled_value)

        emoji_value = os.getenv(ISSUE_EMOJI_ENV_VAR)
        if emoji_value is not None:
            config.issue_emoji.update(parse_issue_emoji(emoji_value))
        return config


def parse_enabled_types(value: str) -> set[str]:
    """Parse a comma separated list of severity tags."""
    tags = {part.strip().lower() for part in value.split(",") if part.strip()}
    if not tags:
        raise ReportConfigurationError(
            f"{ENABLED_TYPES_ENV_VAR} must list at least one severity, got '{value}'."
        )
    return tags


def parse_issue_emoji(value: str) -> dict[str, str]:
    """Parse ``tag=glyph`` pairs separated by commas."""
    mapping: dict[str, str] = {}
    for pair in value.split(","):
        if not pair.strip():
            continue
        tag, separator, emoji = pair.partition("=")
        tag = tag.strip().lower()
        emoji = emoji.strip()
        if not separator or not tag or not emoji:
            raise ReportConfigurationError(
                f"Invalid {ISSUE_EMOJI_ENV_VAR} entry '{pair}'. Expected format is tag=emoji."
            )
        mapping[tag] = emoji
    return mapping


def get_log_level() -> str:
    """Return the configured log level name."""
    return os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
