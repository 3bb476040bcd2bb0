"""Repository-relative paths and commit-anchored issue links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from swiftlint_report.errors import PathResolutionError, UnsupportedReviewHost

if TYPE_CHECKING:
    from swiftlint_report.review_context import ReviewContext

UNSUPPORTED_HOST_MESSAGE = (
    "SwiftLint reports only support GitHub. Links cannot be built for other review hosts."
)


@dataclass(frozen=True, slots=True)
class RepoContext:
    """Per-run values needed to turn a finding into a link."""

    host_url: str
    repo_slug: str
    commit_sha: str
    working_root: str

    @classmethod
    def from_review_context(cls, context: ReviewContext, working_root: str) -> RepoContext:
        """Snapshot the review context, failing fast for non-GitHub hosts."""
        check_scm_support(context)
        return cls(
            host_url=context.host_url,
            repo_slug=context.repo_slug,
            commit_sha=context.commit_sha,
            working_root=working_root,
        )

    def issue_link(self, relative_path: str, line: int | None) -> str:
        """Build the link for one finding in this repository."""
        return build_issue_link(
            self.host_url, self.repo_slug, self.commit_sha, relative_path, line
        )


def check_scm_support(context: ReviewContext) -> None:
    """Raise when the review is not hosted on GitHub."""
    if not context.is_github:
        raise UnsupportedReviewHost(UNSUPPORTED_HOST_MESSAGE)


def to_repo_relative_path(absolute_path: str, working_root: str) -> str:
    """Strip everything up to the first occurrence of ``working_root``.

    The root is searched anywhere in the path, not only as a prefix, and only
    its first occurrence is removed.
    """
    index = absolute_path.find(working_root) if working_root else -1
    if index < 0:
        raise PathResolutionError(
            f"Path '{absolute_path}' is not inside working root '{working_root}'.",
            path=absolute_path,
            working_root=working_root,
        )
    return absolute_path[index + len(working_root) :]


def build_issue_link(
    host_url: str, repo_slug: str, commit_sha: str, relative_path: str, line: int | None
) -> str:
    """Build ``<host>/<slug>/tree/<sha><path>#L<line>``.

    ``relative_path`` is expected to start with a separator already. The line
    anchor is left out for file-level findings.
    """
    link = f"{host_url.rstrip('/')}/{repo_slug}/tree/{commit_sha}{relative_path}"
    if line is None:
        return link
    return f"{link}#L{line}"


def issue_label(relative_path: str, line: int | None) -> str:
    """Return the link text shown for a finding."""
    if line is None:
        return relative_path
    return f"{relative_path} (line {line})"
