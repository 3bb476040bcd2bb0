"""Typer CLI for posting SwiftLint reports on pull requests."""

from __future__ import annotations

from typing import Annotated

import httpx
import typer

from swiftlint_report.config import ReportConfiguration, get_log_level
from swiftlint_report.errors import ReportConfigurationError
from swiftlint_report.github_client import (
    GitHubApiError,
    GitHubAuthError,
    GitHubInputError,
    GitHubReviewContext,
    build_github_client,
    resolve_pull_request_target,
)
from swiftlint_report.observability import configure_logging
from swiftlint_report.pipeline import SwiftLintReporter

app = typer.Typer(help="Surface SwiftLint JSON findings as a pull request comment.")


@app.callback()
def main() -> None:
    """Post SwiftLint findings to GitHub pull requests."""


@app.command("report")
def report_command(
    path: Annotated[
        str | None,
        typer.Argument(help="Existing SwiftLint JSON report. Runs swiftlint when omitted."),
    ] = None,
) -> None:
    """Lint an existing report or generate one, then comment on the pull request."""
    configure_logging(get_log_level())

    try:
        config = ReportConfiguration.from_env()
        repo_full_name, pr_number = resolve_pull_request_target()
    except (ReportConfigurationError, GitHubInputError) as error:
        typer.echo(f"SwiftLint report failed: {error}")
        raise typer.Exit(code=1) from error

    try:
        with build_github_client() as client:
            context = GitHubReviewContext(
                client=client,
                repo_full_name=repo_full_name,
                pr_number=pr_number,
            )
            outcome = SwiftLintReporter(context, config).report(path)
    except GitHubAuthError as error:
        typer.echo(f"SwiftLint report failed: {error}")
        raise typer.Exit(code=1) from error
    except GitHubApiError as error:
        typer.echo(
            "SwiftLint report failed: "
            f"status={error.status_code} endpoint={error.endpoint}."
        )
        raise typer.Exit(code=1) from error
    except httpx.HTTPError as error:
        typer.echo(f"SwiftLint report failed: network error ({error}).")
        raise typer.Exit(code=1) from error

    if outcome.failed:
        typer.echo(f"SwiftLint report failed: {outcome.error}")
        raise typer.Exit(code=1)
    if outcome.published:
        typer.echo(f"Posted {outcome.issue_count} SwiftLint issue(s) to {repo_full_name}#{pr_number}.")
    else:
        typer.echo("No SwiftLint issues to report.")
