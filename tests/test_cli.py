"""Tests for the CLI report command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from swiftlint_report import cli, report_source
from swiftlint_report.github_client import GitHubApiError, GitHubAuthError
from typer.testing import CliRunner

runner = CliRunner()


@dataclass
class _DummyClientContext:
    """Simple context manager to stand in for an HTTP client."""

    def __enter__(self) -> _DummyClientContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        return None


@pytest.fixture
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, review_context):
    """Wire the CLI to a recording review context."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SWIFTLINT_ENABLED_TYPES", raising=False)
    monkeypatch.delenv("SWIFTLINT_ISSUE_EMOJI", raising=False)
    monkeypatch.setattr(cli, "resolve_pull_request_target", lambda: ("acme/rocket", 42))
    monkeypatch.setattr(cli, "build_github_client", lambda: _DummyClientContext())
    monkeypatch.setattr(
        cli,
        "GitHubReviewContext",
        lambda client, repo_full_name, pr_number: review_context,
    )
    monkeypatch.setattr(report_source, "_which", lambda binary: "/usr/local/bin/swiftlint")
    return review_context


def write_report_under_cwd(report_fixture_path: Path) -> Path:
    """Copy the fixture report with finding paths rooted at the current directory."""
    report_path = Path.cwd() / "report.json"
    report_path.write_text(
        report_fixture_path.read_text(encoding="utf-8").replace(
            "/Users/user/development", str(Path.cwd())
        ),
        encoding="utf-8",
    )
    return report_path


@pytest.mark.unit
def test_report_command_posts_table(cli_env, report_fixture_path: Path) -> None:
    report_path = write_report_under_cwd(report_fixture_path)

    result = runner.invoke(cli.app, ["report", str(report_path)])

    assert result.exit_code == 0
    assert "Posted 3 SwiftLint issue(s) to acme/rocket#42." in result.output
    assert len(cli_env.markdowns) == 1


@pytest.mark.unit
def test_report_command_with_empty_report(cli_env, empty_report_path: Path) -> None:
    result = runner.invoke(cli.app, ["report", str(empty_report_path)])

    assert result.exit_code == 0
    assert "No SwiftLint issues to report." in result.output
    assert cli_env.markdowns == []


@pytest.mark.unit
def test_report_command_fails_when_swiftlint_missing(
    monkeypatch: pytest.MonkeyPatch, cli_env
) -> None:
    monkeypatch.setattr(report_source, "_which", lambda binary: None)

    result = runner.invoke(cli.app, ["report"])

    assert result.exit_code == 1
    assert "swiftlint is not in the user's PATH, or it failed to install" in result.output
    assert cli_env.errors == ["swiftlint is not in the user's PATH, or it failed to install"]


@pytest.mark.unit
def test_report_command_fails_when_token_missing(
    monkeypatch: pytest.MonkeyPatch, cli_env, empty_report_path: Path
) -> None:
    def _raise_missing_token() -> _DummyClientContext:
        raise GitHubAuthError("Missing token.")

    monkeypatch.setattr(cli, "build_github_client", _raise_missing_token)

    result = runner.invoke(cli.app, ["report", str(empty_report_path)])

    assert result.exit_code == 1
    assert "SwiftLint report failed: Missing token." in result.output


@pytest.mark.unit
def test_report_command_reports_api_errors(cli_env, report_fixture_path: Path) -> None:
    def _raise_api_error(markdown: str) -> None:
        raise GitHubApiError(
            "boom", status_code=403, endpoint="/repos/acme/rocket/issues/42/comments"
        )

    cli_env.publish_markdown = _raise_api_error
    report_path = write_report_under_cwd(report_fixture_path)

    result = runner.invoke(cli.app, ["report", str(report_path)])

    assert result.exit_code == 1
    assert "status=403 endpoint=/repos/acme/rocket/issues/42/comments." in result.output


@pytest.mark.unit
def test_report_command_rejects_bad_emoji_config(
    monkeypatch: pytest.MonkeyPatch, cli_env
) -> None:
    monkeypatch.setenv("SWIFTLINT_ISSUE_EMOJI", "warning")

    result = runner.invoke(cli.app, ["report"])

    assert result.exit_code == 1
    assert "Expected format is tag=emoji." in result.output


@pytest.mark.unit
def test_report_command_shows_failure_when_status_post_is_rejected(
    monkeypatch: pytest.MonkeyPatch, cli_env
) -> None:
    def _raise_forbidden(message: str) -> None:
        raise GitHubApiError(
            "forbidden", status_code=403, endpoint="/repos/acme/rocket/statuses/abc"
        )

    monkeypatch.setattr(report_source, "_which", lambda binary: None)
    cli_env.fail = _raise_forbidden

    result = runner.invoke(cli.app, ["report"])

    assert result.exit_code == 1
    assert (
        "SwiftLint report failed: swiftlint is not in the user's PATH, or it failed to install"
        in result.output
    )
