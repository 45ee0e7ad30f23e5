"""Shared test fixtures."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from changelog_builder.core.changelog import ReleaseNotesOptions
from changelog_builder.core.commits import CommitInfo
from changelog_builder.core.pull_requests import PullRequestInfo
from changelog_builder.core.tags import TagInfo


def make_pr(
    number: int,
    labels: list[str] | None = None,
    title: str | None = None,
    body: str = "",
    merged_day: int | None = None,
    **kwargs,
) -> PullRequestInfo:
    """Create a pull request merged on day ``merged_day`` (default: ``number``) of January."""
    return PullRequestInfo(
        number=number,
        title=title if title is not None else f"PR {number}",
        html_url=f"https://github.com/owner/repo/pull/{number}",
        merged_at=datetime(2024, 1, merged_day or number, 12, 0, tzinfo=UTC),
        author="octocat",
        labels=list(labels or []),
        body=body,
        **kwargs,
    )


def make_commit(sha: str, day: int, message: str | None = None) -> CommitInfo:
    """Create a commit dated on day ``day`` of January."""
    return CommitInfo.from_message(
        sha=sha,
        message=message or f"Commit {sha}",
        author="Test",
        date=datetime(2024, 1, day, tzinfo=UTC),
    )


@pytest.fixture
def options() -> ReleaseNotesOptions:
    return ReleaseNotesOptions(owner="owner", repo="repo", from_tag="v1.0.0", to_tag="v1.1.0")


@pytest.fixture
def sample_tags() -> list[TagInfo]:
    return [
        TagInfo("v2.0.0", "sha4"),
        TagInfo("v1.5.0-rc1", "sha3"),
        TagInfo("v1.5.0", "sha2"),
        TagInfo("v1.0.0", "sha1"),
    ]
