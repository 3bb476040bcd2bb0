"""Shared pytest fixtures and test-run configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom pytest options for integration test execution."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run tests marked as integration (external dependencies).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly enabled."""
    run_integration = config.getoption("--run-integration")
    env_enabled = os.getenv("RUN_INTEGRATION_TESTS") == "1"
    if run_integration or env_enabled:
        return

    skip_marker = pytest.mark.skip(
        reason=(
            "Integration tests are disabled by default. "
            "Use --run-integration or set RUN_INTEGRATION_TESTS=1."
        )
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_marker)


@dataclass
class RecordingReviewContext:
    """In-memory review context that records what the pipeline publishes."""

    host_url: str = "https://github.com"
    repo_slug: str = "acme/rocket"
    commit_sha: str = "123abc"
    is_github: bool = True
    markdowns: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def publish_markdown(self, markdown: str) -> None:
        self.markdowns.append(markdown)

    def fail(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def review_context() -> RecordingReviewContext:
    return RecordingReviewContext()


@pytest.fixture
def report_fixture_path() -> Path:
    return FIXTURES_DIR / "report_fixture.json"


@pytest.fixture
def empty_report_path() -> Path:
    return FIXTURES_DIR / "empty_report.json"
