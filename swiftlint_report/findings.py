"""Normalized SwiftLint findings."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from swiftlint_report.errors import ReportUnavailable


class Severity(StrEnum):
    """Severity tags SwiftLint reports."""

    WARNING = "warning"
    ERROR = "error"


class Finding(BaseModel):
    """One entry of a SwiftLint JSON report."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    severity: str = ""
    file: str = Field(min_length=1)
    # None for file-level violations such as file_name.
    line: int | None = Field(default=None, ge=1)
    reason: str
    rule_id: str | None = None
    character: int | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value: object) -> str:
        """Lowercase the severity tag.

        Missing, null, or non-string tags become strings so the finding is kept
        and simply fails the severity filter.
        """
        if value is None:
            return ""
        return str(value).lower()

    @property
    def is_known_severity(self) -> bool:
        """Return whether the tag is one SwiftLint documents."""
        return self.severity in set(Severity)


def parse_findings(raw_findings: Sequence[dict[str, Any]]) -> list[Finding]:
    """Validate raw report entries into findings, preserving report order."""
    findings: list[Finding] = []
    for index, entry in enumerate(raw_findings):
        try:
            findings.append(Finding.model_validate(entry))
        except ValidationError as error:
            raise ReportUnavailable(
                f"Report entry {index} is not a valid SwiftLint finding: "
                f"{error.error_count()} validation error(s)."
            ) from error
    return findings
