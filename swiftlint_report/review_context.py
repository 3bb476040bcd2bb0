"""Review context contract used by the report pipeline."""

from __future__ import annotations

from typing import Protocol


class ReviewContext(Protocol):
    """Code review the report is attached to.

    ``is_github`` guards link building: commit links are only produced for
    GitHub-hosted reviews.
    """

    @property
    def host_url(self) -> str:
        """Base web URL of the hosting service, e.g. ``https://github.com``."""

    @property
    def repo_slug(self) -> str:
        """Repository in owner/repo format."""

    @property
    def commit_sha(self) -> str:
        """Head commit of the change under review."""

    @property
    def is_github(self) -> bool:
        """Return whether the review is hosted on GitHub."""

    def publish_markdown(self, markdown: str) -> None:
        """Attach a markdown comment to the review."""

    def fail(self, message: str) -> None:
        """Report a failed check with a short status message."""
