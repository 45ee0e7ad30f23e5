"""GitHub REST API access for tags, commit comparisons and pull requests."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import requests

from changelog_builder.core.commits import CommitInfo, DiffInfo, sort_commits
from changelog_builder.core.pull_requests import PullRequestInfo, parse_timestamp
from changelog_builder.core.tags import TagInfo
from changelog_builder.exceptions import GitHubApiError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100
RATE_LIMIT_FALLBACK_WAIT = 60


class GitHubClient:
    """Minimal GitHub REST client.

    Args:
        token: Token for authenticated requests; empty for anonymous access
        api_url: API base URL (GitHub Enterprise: ``https://host/api/v3``)
        session: Session to send requests with
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        session: requests.Session | None = None,
        timeout: float = 60,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "changelog-builder",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON resource, waiting out rate limits.

        Raises:
            GitHubApiError: If the request fails
        """
        url = self.api_url + path
        while True:
            try:
                resp = self.session.get(
                    url, headers=self._headers(), params=params, timeout=self.timeout
                )
            except requests.RequestException as e:
                raise GitHubApiError(f"GET {path} failed: {e}") from e

            if resp.status_code == 403 and "rate limit" in resp.text.lower():
                reset = resp.headers.get("X-RateLimit-Reset")
                if reset:
                    wait_s = _rate_limit_wait(reset)
                    logger.warning("GitHub rate limit hit. Sleeping %ss", wait_s)
                    time.sleep(wait_s)
                    continue
            if resp.status_code >= 400:
                raise GitHubApiError(
                    f"GET {path} failed: {resp.status_code} {resp.text}",
                    status_code=resp.status_code,
                )
            try:
                return resp.json()
            except ValueError as e:
                raise GitHubApiError(
                    f"GET {path} returned invalid JSON: {e}", status_code=resp.status_code
                ) from e

    def iter_pages(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        per_page: int = PER_PAGE,
    ) -> Iterator[list[Any]]:
        """Yield result pages until an empty page is returned."""
        base_params = {**(params or {}), "per_page": per_page}
        page = 1
        while True:
            data = self.get(path, params={**base_params, "page": page})
            if not isinstance(data, list) or not data:
                return
            yield data
            page += 1

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        *,
        per_page: int = PER_PAGE,
    ) -> Iterator[Any]:
        """Yield items across all pages."""
        for page in self.iter_pages(path, params, per_page=per_page):
            yield from page

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> dict[str, Any]:
        return self.get(f"/repos/{owner}/{repo}/compare/{base}...{head}")

    def get_tags(self, owner: str, repo: str, max_tags_to_fetch: int) -> list[TagInfo]:
        """Fetch up to ``max_tags_to_fetch`` tags, newest first.

        Whole pages are consumed, so slightly more tags than requested may be
        returned.
        """
        tags: list[TagInfo] = []
        params = {"direction": "desc"}
        path = f"/repos/{owner}/{repo}/tags"

        for page in self.iter_pages(path, params):
            tags.extend(TagInfo(name=t["name"], commit=t["commit"]["sha"]) for t in page)
            if len(tags) >= max_tags_to_fetch:
                break

        logger.info(
            "Found %d (fetching max: %d) tags from the GitHub API for %s/%s",
            len(tags),
            max_tags_to_fetch,
            owner,
            repo,
        )
        return tags

    def get_diff(self, owner: str, repo: str, base: str, head: str) -> DiffInfo:
        """Compare two refs, following the history past the API's commit limit.

        The compare endpoint returns a limited number of commits. The oldest
        returned commit's parent becomes the next head until a comparison
        reports no commits. Older batches are prepended.
        """
        diff = DiffInfo()
        raw_commits: list[dict[str, Any]] = []
        compare_head = head

        while True:
            result = self.compare_commits(owner, repo, base, compare_head)
            batch = result.get("commits") or []
            if result.get("total_commits", len(batch)) == 0 or not batch:
                break

            files = result.get("files") or []
            diff.changed_files += len(files)
            for file in files:
                diff.additions += file.get("additions", 0)
                diff.deletions += file.get("deletions", 0)
                diff.changes += file.get("changes", 0)

            diff.commits += len(batch)
            raw_commits = batch + raw_commits
            compare_head = f"{raw_commits[0]['sha']}^"

        logger.info(
            "Found %d commits from the GitHub API for %s/%s", len(raw_commits), owner, repo
        )

        diff.commit_info = sort_commits(
            _commit_from_api(commit) for commit in raw_commits if commit.get("sha")
        )
        return diff

    def get_merged_pull_requests(
        self,
        owner: str,
        repo: str,
        since: datetime,
        until: datetime,
    ) -> list[PullRequestInfo]:
        """Fetch pull requests merged between ``since`` and ``until`` (inclusive)."""
        pull_requests: list[PullRequestInfo] = []
        params = {"state": "closed", "sort": "updated", "direction": "desc"}

        for data in self.paginate(f"/repos/{owner}/{repo}/pulls", params=params):
            updated_at = data.get("updated_at")
            if updated_at and parse_timestamp(updated_at) < since:
                # Sorted by last update; nothing older can have been merged later
                break
            if not data.get("merged_at"):
                continue

            pr = PullRequestInfo.from_api(data)
            if since <= pr.merged_at <= until:
                pull_requests.append(pr)

        logger.info(
            "Found %d merged pull requests from the GitHub API for %s/%s",
            len(pull_requests),
            owner,
            repo,
        )
        return pull_requests


def _rate_limit_wait(reset: str) -> int:
    """Seconds to wait until ``reset`` (epoch seconds), at least one."""
    try:
        reset_at = int(reset)
    except ValueError:
        logger.debug("Unparseable X-RateLimit-Reset %r", reset)
        return RATE_LIMIT_FALLBACK_WAIT
    return max(1, reset_at - int(time.time()) + 1)


def _commit_from_api(data: dict[str, Any]) -> CommitInfo:
    commit = data.get("commit") or {}
    committer = commit.get("committer") or {}
    author = commit.get("author") or {}
    return CommitInfo.from_message(
        sha=data["sha"],
        message=commit.get("message") or "",
        author=author.get("name") or "",
        date=parse_timestamp(committer["date"]),
    )
