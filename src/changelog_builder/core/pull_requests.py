"""Pull request records consumed by the changelog builder."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass
class PullRequestInfo:
    """A merged pull request.

    ``labels`` is mutable: label extraction appends derived labels to it.
    """

    number: int
    title: str
    html_url: str
    merged_at: datetime
    author: str
    labels: list[str] = field(default_factory=list)
    milestone: str | None = None
    body: str = ""
    assignees: list[str] = field(default_factory=list)
    requested_reviewers: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> PullRequestInfo:
        """Build a PullRequestInfo from a GitHub REST pull request payload."""
        milestone = data.get("milestone") or {}
        return cls(
            number=int(data["number"]),
            title=data.get("title") or "",
            html_url=data.get("html_url") or "",
            merged_at=parse_timestamp(data["merged_at"]),
            author=(data.get("user") or {}).get("login") or "",
            labels=[label["name"] for label in data.get("labels") or []],
            milestone=milestone.get("title"),
            body=data.get("body") or "",
            assignees=[a["login"] for a in data.get("assignees") or []],
            requested_reviewers=[r["login"] for r in data.get("requested_reviewers") or []],
        )

    def copy(self) -> PullRequestInfo:
        """Return a copy whose lists can be mutated independently."""
        return deepcopy(self)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp."""
    # GitHub uses a trailing "Z" for UTC
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def sort_pull_requests(
    pull_requests: Iterable[PullRequestInfo],
    ascending: bool,
) -> list[PullRequestInfo]:
    """Sort pull requests by merge time.

    Pull requests merged at the same time keep their relative order.
    """
    return sorted(pull_requests, key=lambda pr: pr.merged_at, reverse=not ascending)
