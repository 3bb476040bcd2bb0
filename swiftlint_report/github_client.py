"""GitHub API wrapper and pull request review context."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_WEB_BASE_URL = "https://github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_MAX_RETRIES = 3
DEFAULT_RETRY_BACKOFF_SECONDS = 0.5
STATUS_CONTEXT = "swiftlint"
STATUS_DESCRIPTION_MAX_LENGTH = 140
GITHUB_REPOSITORY_ENV_VAR = "GITHUB_REPOSITORY"
GITHUB_EVENT_PATH_ENV_VAR = "GITHUB_EVENT_PATH"
GITHUB_SERVER_URL_ENV_VAR = "GITHUB_SERVER_URL"
GITHUB_API_URL_ENV_VAR = "GITHUB_API_URL"
PR_NUMBER_ENV_VAR = "SWIFTLINT_PR_NUMBER"

logger = logging.getLogger(__name__)


class GitHubAuthError(RuntimeError):
    """Raised when GitHub authentication configuration is missing or invalid."""


class GitHubInputError(ValueError):
    """Raised when repository or PR input values are invalid."""


class GitHubApiError(RuntimeError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, *, status_code: int, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class GitHubRateLimitError(GitHubApiError):
    """Raised when GitHub API rate limiting prevents request completion."""


def _ensure_mapping(value: object, *, context: str) -> dict[str, Any]:
    """Ensure a response fragment is a JSON object."""
    if not isinstance(value, dict):
        raise GitHubApiError(
            f"Expected JSON object for {context}.",
            status_code=500,
            endpoint=context,
        )
    return value


def _require_str(payload: dict[str, Any], *, key: str, endpoint: str) -> str:
    """Read a required string field from payload."""
    value = payload.get(key)
    if not isinstance(value, str):
        raise GitHubApiError(
            f"Expected string field '{key}' in GitHub response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def _require_object(payload: dict[str, Any], *, key: str, endpoint: str) -> dict[str, Any]:
    """Read a required object field from payload."""
    value = payload.get(key)
    if not isinstance(value, dict):
        raise GitHubApiError(
            f"Expected object field '{key}' in GitHub response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def _is_retryable_status(status_code: int) -> bool:
    """Return whether a status code is retryable under policy."""
    return status_code == 429 or 500 <= status_code < 600


def _parse_retry_after_seconds(response: httpx.Response) -> float | None:
    """Parse Retry-After header as seconds if present and valid."""
    retry_after = response.headers.get("Retry-After")
    if retry_after is None:
        return None
    try:
        parsed_value = float(retry_after)
    except ValueError:
        return None
    if parsed_value < 0:
        return None
    return parsed_value


def _compute_retry_delay_seconds(response: httpx.Response, *, attempt_number: int) -> float:
    """Compute retry delay from Retry-After header or exponential backoff."""
    retry_after_seconds = _parse_retry_after_seconds(response)
    if retry_after_seconds is not None:
        return retry_after_seconds
    return DEFAULT_RETRY_BACKOFF_SECONDS * (2 ** (attempt_number - 1))


def _sleep_for_retry(seconds: float) -> None:
    """Sleep helper for retry delays (wrapped for deterministic tests)."""
    time.sleep(seconds)


def _raise_http_error(response: httpx.Response, endpoint: str) -> None:
    """Raise a typed error for a non-success GitHub API response."""
    message = f"GitHub API request failed with status {response.status_code} for '{endpoint}'."
    if response.status_code == 429:
        raise GitHubRateLimitError(
            message,
            status_code=response.status_code,
            endpoint=endpoint,
        )
    raise GitHubApiError(
        message,
        status_code=response.status_code,
        endpoint=endpoint,
    )


def _request_with_retries(
    client: httpx.Client,
    method: str,
    endpoint: str,
    *,
    json_body: dict[str, Any] | None = None,
    max_attempts: int = GITHUB_MAX_RETRIES,
) -> httpx.Response:
    """Perform a request with retry handling for 429/5xx responses."""
    for attempt_number in range(1, max_attempts + 1):
        response = client.request(method, endpoint, json=json_body)
        if response.status_code < 400:
            return response

        should_retry = _is_retryable_status(response.status_code) and attempt_number < max_attempts
        if not should_retry:
            _raise_http_error(response, endpoint)

        delay_seconds = _compute_retry_delay_seconds(response, attempt_number=attempt_number)
        logger.debug(
            "Retrying %s %s after status %s in %.1fs",
            method,
            endpoint,
            response.status_code,
            delay_seconds,
        )
        _sleep_for_retry(delay_seconds)

    raise RuntimeError("Unexpected retry loop exit without a response.")


def parse_repo_full_name(repo_full_name: str) -> tuple[str, str]:
    """Parse and validate repository input in owner/repo format."""
    owner, separator, repo = repo_full_name.strip().partition("/")
    if not separator or not owner or not repo or "/" in repo:
        raise GitHubInputError(
            f"Invalid repo '{repo_full_name}'. Expected format is owner/repo."
        )
    return owner, repo


def validate_pr_number(pr_number: int) -> int:
    """Validate and normalize pull request number input."""
    if pr_number <= 0:
        raise GitHubInputError(f"Invalid PR number '{pr_number}'. Expected a positive integer.")
    return pr_number


def fetch_pull_request_head_sha(
    *,
    client: httpx.Client,
    repo_full_name: str,
    pr_number: int,
) -> str:
    """Fetch the head commit SHA of a pull request."""
    owner, repo = parse_repo_full_name(repo_full_name)
    normalized_pr_number = validate_pr_number(pr_number)
    endpoint = f"/repos/{owner}/{repo}/pulls/{normalized_pr_number}"

    response = _request_with_retries(client, "GET", endpoint)
    payload = _ensure_mapping(response.json(), context=endpoint)
    head_payload = _require_object(payload, key="head", endpoint=endpoint)
    return _require_str(head_payload, key="sha", endpoint=endpoint)


def post_issue_comment(
    *,
    client: httpx.Client,
    repo_full_name: str,
    pr_number: int,
    body: str,
) -> str:
    """Post a markdown comment on a pull request and return its URL."""
    owner, repo = parse_repo_full_name(repo_full_name)
    normalized_pr_number = validate_pr_number(pr_number)
    endpoint = f"/repos/{owner}/{repo}/issues/{normalized_pr_number}/comments"

    response = _request_with_retries(client, "POST", endpoint, json_body={"body": body})
    payload = _ensure_mapping(response.json(), context=endpoint)
    return _require_str(payload, key="html_url", endpoint=endpoint)


def post_commit_status(
    *,
    client: httpx.Client,
    repo_full_name: str,
    sha: str,
    state: str,
    description: str,
    context: str = STATUS_CONTEXT,
) -> None:
    """Set a commit status; the description is cut to GitHub's length limit."""
    owner, repo = parse_repo_full_name(repo_full_name)
    endpoint = f"/repos/{owner}/{repo}/statuses/{sha}"
    if len(description) > STATUS_DESCRIPTION_MAX_LENGTH:
        description = description[: STATUS_DESCRIPTION_MAX_LENGTH - 1] + "…"
    _request_with_retries(
        client,
        "POST",
        endpoint,
        json_body={"state": state, "description": description, "context": context},
    )


def get_github_token() -> str:
    """Read GitHub token from environment and fail fast if missing."""
    token, _source = get_github_token_with_source()
    return token


def get_github_token_with_source() -> tuple[str, str]:
    """Read GitHub token and return token value with environment source key."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    github_token = os.getenv("GITHUB_TOKEN")
    if github_token:
        return github_token, "GITHUB_TOKEN"

    gh_token = os.getenv("GH_TOKEN")
    if gh_token:
        return gh_token, "GH_TOKEN"

    message = "Missing GitHub token. Set GITHUB_TOKEN (preferred) or GH_TOKEN."
    raise GitHubAuthError(message)


def build_github_client(
    timeout_seconds: int = 20,
    *,
    base_url: str | None = None,
    trust_env: bool = True,
) -> httpx.Client:
    """Build an authenticated GitHub HTTP client."""
    token = get_github_token()
    headers = {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
    return httpx.Client(
        base_url=base_url or os.getenv(GITHUB_API_URL_ENV_VAR) or GITHUB_API_BASE_URL,
        headers=headers,
        timeout=timeout_seconds,
        trust_env=trust_env,
    )


def _pr_number_from_event(event_path: str) -> int | None:
    """Read the pull request number from a GitHub Actions event payload."""
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise GitHubInputError(f"Could not read GitHub event payload '{event_path}'.") from error
    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    if not isinstance(number, int) or isinstance(number, bool):
        return None
    return number


def resolve_pull_request_target(
    *,
    repo_full_name: str | None = None,
    pr_number: int | None = None,
) -> tuple[str, int]:
    """Resolve the repository and pull request to report on from the environment."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    resolved_repo = repo_full_name or os.getenv(GITHUB_REPOSITORY_ENV_VAR)
    if not resolved_repo:
        raise GitHubInputError(f"Missing repository. Set {GITHUB_REPOSITORY_ENV_VAR}.")
    parse_repo_full_name(resolved_repo)

    if pr_number is not None:
        return resolved_repo, validate_pr_number(pr_number)

    pr_value = os.getenv(PR_NUMBER_ENV_VAR)
    if pr_value is not None:
        try:
            parsed_pr_number = int(pr_value)
        except ValueError as error:
            raise GitHubInputError(
                f"{PR_NUMBER_ENV_VAR} must be an integer, got '{pr_value}'."
            ) from error
        return resolved_repo, validate_pr_number(parsed_pr_number)

    event_path = os.getenv(GITHUB_EVENT_PATH_ENV_VAR)
    if event_path:
        event_pr_number = _pr_number_from_event(event_path)
        if event_pr_number is not None:
            return resolved_repo, validate_pr_number(event_pr_number)

    raise GitHubInputError(
        f"Missing pull request number. Set {PR_NUMBER_ENV_VAR} or run on a pull_request event."
    )


class GitHubReviewContext:
    """Review context for one GitHub pull request."""

    is_github = True

    def __init__(
        self,
        *,
        client: httpx.Client,
        repo_full_name: str,
        pr_number: int,
        host_url: str | None = None,
    ) -> None:
        parse_repo_full_name(repo_full_name)
        self._client = client
        self._repo_full_name = repo_full_name.strip()
        self._pr_number = validate_pr_number(pr_number)
        self._host_url = (
            host_url or os.getenv(GITHUB_SERVER_URL_ENV_VAR) or GITHUB_WEB_BASE_URL
        ).rstrip("/")
        self._commit_sha: str | None = None
        self.comment_urls: list[str] = []

    @property
    def host_url(self) -> str:
        return self._host_url

    @property
    def repo_slug(self) -> str:
        return self._repo_full_name

    @property
    def pr_number(self) -> int:
        return self._pr_number

    @property
    def commit_sha(self) -> str:
        """Pull request head SHA, fetched on first access."""
        if self._commit_sha is None:
            self._commit_sha = fetch_pull_request_head_sha(
                client=self._client,
                repo_full_name=self._repo_full_name,
                pr_number=self._pr_number,
            )
        return self._commit_sha

    def publish_markdown(self, markdown: str) -> None:
        comment_url = post_issue_comment(
            client=self._client,
            repo_full_name=self._repo_full_name,
            pr_number=self._pr_number,
            body=markdown,
        )
        logger.info("Posted SwiftLint report comment %s", comment_url)
        self.comment_urls.append(comment_url)

    def fail(self, message: str) -> None:
        post_commit_status(
            client=self._client,
            repo_full_name=self._repo_full_name,
            sha=self.commit_sha,
            state="failure",
            description=message,
        )
        logger.info("Marked %s as failed: %s", self.commit_sha, message)
