"""Commit history normalization.

Commits arrive from several compare round trips and may overlap. They are
deduplicated by sha and ordered oldest first before anything else looks at
them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime


@dataclass(frozen=True)
class CommitInfo:
    """A commit as needed for release notes."""

    sha: str
    summary: str
    message: str
    author: str
    date: datetime

    @classmethod
    def from_message(cls, sha: str, message: str, author: str, date: datetime) -> CommitInfo:
        """Build a CommitInfo, taking the summary from the first message line."""
        return cls(
            sha=sha,
            summary=message.split("\n", 1)[0],
            message=message,
            author=author,
            date=date,
        )


@dataclass
class DiffInfo:
    """Accumulated comparison between two refs."""

    changed_files: int = 0
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    commits: int = 0
    commit_info: list[CommitInfo] = field(default_factory=list)


def sort_commits(commits: Iterable[CommitInfo]) -> list[CommitInfo]:
    """Deduplicate commits by sha and sort them by date, oldest first.

    The first occurrence of a sha wins. Commits with equal dates keep their
    relative order.
    """
    seen: set[str] = set()
    unique: list[CommitInfo] = []

    for commit in commits:
        if commit.sha in seen:
            continue
        seen.add(commit.sha)
        unique.append(commit)

    return sorted(unique, key=lambda c: c.date)


def filter_commits(
    commits: Iterable[CommitInfo],
    exclude_merge_branches: Iterable[str] | None,
) -> list[CommitInfo]:
    """Drop commits whose summary contains any of the given substrings.

    Args:
        commits: Commits to filter
        exclude_merge_branches: Plain substrings (not regexes); empty or None
            keeps every commit

    Returns:
        Commits that matched none of the substrings
    """
    excludes = list(exclude_merge_branches or [])
    if not excludes:
        return list(commits)

    return [c for c in commits if not any(pattern in c.summary for pattern in excludes)]
