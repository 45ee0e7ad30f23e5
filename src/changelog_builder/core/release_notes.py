"""Release notes for a tag range, pulled from GitHub.

Resolves the starting tag when it is not given, collects the commits
between the two tags, and builds the changelog from the pull requests
merged in that window.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from changelog_builder.core.changelog import ReleaseNotesOptions, build_changelog
from changelog_builder.core.commits import filter_commits
from changelog_builder.core.tags import find_predecessor_tag

if TYPE_CHECKING:
    from changelog_builder.config.models import Configuration
    from changelog_builder.vcs.github import GitHubClient

logger = logging.getLogger(__name__)


def resolve_from_tag(
    client: GitHubClient,
    config: Configuration,
    owner: str,
    repo: str,
    to_tag: str,
    ignore_pre_releases: bool = False,
) -> str | None:
    """Find the tag preceding ``to_tag``, or None if there is none."""
    tags = client.get_tags(owner, repo, config.max_tags_to_fetch)
    predecessor = find_predecessor_tag(tags, to_tag, ignore_pre_releases)
    if predecessor is None:
        return None
    logger.info("Resolved previous tag to %s", predecessor.name)
    return predecessor.name


def pull_release_notes(
    client: GitHubClient,
    config: Configuration,
    owner: str,
    repo: str,
    to_tag: str,
    from_tag: str | None = None,
    ignore_pre_releases: bool = False,
) -> str | None:
    """Build release notes for the changes between ``from_tag`` and ``to_tag``.

    Args:
        client: GitHub client
        config: Changelog configuration
        owner: Repository owner
        repo: Repository name
        to_tag: Tag of the release
        from_tag: Tag of the previous release; resolved from the tag list if None
        ignore_pre_releases: Skip pre-release tags when resolving ``from_tag``

    Returns:
        The release notes, or None if there is no previous tag or no change
    """
    if not from_tag:
        from_tag = resolve_from_tag(client, config, owner, repo, to_tag, ignore_pre_releases)
        if from_tag is None:
            logger.error("Could not find the previous tag for %s", to_tag)
            return None

    logger.info("Comparing %s/%s %s...%s", owner, repo, from_tag, to_tag)
    diff = client.get_diff(owner, repo, from_tag, to_tag)
    commits = filter_commits(diff.commit_info, config.exclude_merge_branches)
    if not commits:
        logger.warning("No commits found between %s and %s", from_tag, to_tag)
        return None

    pull_requests = client.get_merged_pull_requests(
        owner, repo, since=commits[0].date, until=commits[-1].date
    )

    options = ReleaseNotesOptions(
        owner=owner,
        repo=repo,
        from_tag=from_tag,
        to_tag=to_tag,
        ignore_pre_releases=ignore_pre_releases,
    )
    return build_changelog(pull_requests, config, options)
