"""SwiftLint availability probe and JSON report acquisition."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any

from swiftlint_report.errors import ReportUnavailable

LINTER_BINARY = "swiftlint"
DEFAULT_REPORT_FILENAME = "swiftlint_report.json"

logger = logging.getLogger(__name__)


def _which(binary: str) -> str | None:
    """Look up an executable on PATH (wrapped for deterministic tests)."""
    return shutil.which(binary)


def _run_linter(command: list[str], *, output_path: Path) -> int:
    """Run the linter with stdout redirected into ``output_path``."""
    with output_path.open("w", encoding="utf-8") as output_file:
        completed = subprocess.run(  # nosec B603 - fixed linter command
            command,
            stdout=output_file,
            check=False,
        )
    return completed.returncode


def is_linter_installed(linter: str = LINTER_BINARY) -> bool:
    """Return whether the linter binary is on the executable search path."""
    location = _which(linter)
    return bool(location and location.strip())


def lint_command(linter: str = LINTER_BINARY) -> list[str]:
    """Build the quiet JSON reporter command line."""
    return [linter, "lint", "--quiet", "--reporter", "json"]


def load_report_json(path: Path | str) -> list[dict[str, Any]]:
    """Read a report file that holds a JSON array of objects."""
    report_path = Path(path)
    try:
        text = report_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ReportUnavailable(f"Could not read SwiftLint report '{report_path}'.") from error

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise ReportUnavailable(
            f"SwiftLint report '{report_path}' is not valid JSON: {error.msg}."
        ) from error

    if not isinstance(payload, list):
        raise ReportUnavailable(f"Expected JSON array in SwiftLint report '{report_path}'.")
    rows: list[dict[str, Any]] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ReportUnavailable(
                f"Expected all entries of SwiftLint report '{report_path}' to be JSON objects."
            )
        rows.append(item)
    return rows


class ReportSource:
    """Obtain raw findings from an existing report or a fresh linter run."""

    def __init__(
        self,
        *,
        linter: str = LINTER_BINARY,
        output_dir: Path | str | None = None,
        report_filename: str = DEFAULT_REPORT_FILENAME,
    ) -> None:
        self.linter = linter
        self._output_dir = Path(output_dir) if output_dir is not None else None
        self.report_filename = report_filename

    def obtain(self, explicit_path: Path | str | None = None) -> list[dict[str, Any]]:
        """Return the raw report entries, generating the report when no path is given."""
        if explicit_path is not None:
            logger.debug("Reading existing SwiftLint report %s", explicit_path)
            return load_report_json(explicit_path)
        return load_report_json(self.generate_report())

    def generate_report(self) -> Path:
        """Run the linter and return the path of the report it wrote.

        The report file is left in place after the run.
        """
        output_dir = self._output_dir if self._output_dir is not None else Path.cwd()
        output_path = output_dir / self.report_filename
        command = lint_command(self.linter)
        logger.info("Generating SwiftLint report into %s", output_path)
        try:
            return_code = _run_linter(command, output_path=output_path)
        except OSError as error:
            raise ReportUnavailable(
                f"Could not run '{' '.join(command)}': {error.strerror or error}."
            ) from error
        logger.debug("SwiftLint exited with status %s", return_code)
        return output_path
