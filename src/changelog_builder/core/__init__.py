"""Core changelog logic.

This package contains the building blocks of the release notes:
- Tag ordering and predecessor resolution
- Commit history normalization
- Label extraction, regex transformers and pull request templates
- Changelog assembly
"""

from __future__ import annotations

from changelog_builder.core.changelog import (
    ReleaseNotesOptions,
    build_changelog,
    fill_additional_placeholders,
)
from changelog_builder.core.commits import CommitInfo, DiffInfo, filter_commits, sort_commits
from changelog_builder.core.pull_requests import PullRequestInfo, sort_pull_requests
from changelog_builder.core.tags import TagInfo, compare_tags, find_predecessor_tag, sort_tags
from changelog_builder.core.transform import (
    RegexTransformer,
    extract_labels,
    fill_template,
    transform,
    validate_transformers,
)

__all__ = [
    # Commits
    "CommitInfo",
    "DiffInfo",
    # Pull requests
    "PullRequestInfo",
    # Transform
    "RegexTransformer",
    # Changelog
    "ReleaseNotesOptions",
    # Tags
    "TagInfo",
    "build_changelog",
    "compare_tags",
    "extract_labels",
    "fill_additional_placeholders",
    "fill_template",
    "filter_commits",
    "find_predecessor_tag",
    "sort_commits",
    "sort_pull_requests",
    "sort_tags",
    "transform",
    "validate_transformers",
]
