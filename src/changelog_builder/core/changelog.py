"""Changelog assembly from pull requests.

Pull requests are rendered with the configured pull request template,
rewritten by the configured transformers, and sorted into categories. A
pull request appears in every category whose labels it carries; pull
requests carrying an ignored label appear only in the ignored section.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from changelog_builder.core.pull_requests import sort_pull_requests
from changelog_builder.core.transform import (
    extract_labels,
    fill_placeholder,
    fill_template,
    transform,
    validate_transformers,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from changelog_builder.config.models import Category, Configuration
    from changelog_builder.core.pull_requests import PullRequestInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseNotesOptions:
    """Where the release notes are for."""

    owner: str
    repo: str
    from_tag: str
    to_tag: str
    ignore_pre_releases: bool = False


def have_common_elements(first: Iterable[str], second: Iterable[str]) -> bool:
    """Return True if the two label collections share at least one label."""
    return not set(first).isdisjoint(second)


def build_changelog(
    pull_requests: Iterable[PullRequestInfo],
    config: Configuration,
    options: ReleaseNotesOptions,
) -> str:
    """Build the release notes document.

    Args:
        pull_requests: Merged pull requests for the release
        config: Changelog configuration
        options: Owner, repository and tag range of the release

    Returns:
        The filled document template
    """
    # Work on copies so the caller's records are never changed
    prs = sort_pull_requests((pr.copy() for pr in pull_requests), config.sort_ascending)
    logger.info("Sorted all pull requests ascending: %s", config.sort)

    extract_labels(prs, config.label_extractor)

    transformers = validate_transformers(config.transformers)
    rendered = [(pr, transform(fill_template(pr, config.pr_template), transformers)) for pr in prs]
    logger.info("Used %d transformers to adjust message", len(transformers))
    logger.info("Wrote messages for %d pull requests", len(prs))

    categorized: list[tuple[Category, list[str]]] = [(c, []) for c in config.categories]
    catch_all = next((entries for c, entries in categorized if not c.labels), None)

    categorized_prs: list[str] = []
    uncategorized_prs: list[str] = []
    ignored_prs: list[str] = []

    for pr, body in rendered:
        if have_common_elements(config.ignore_labels, pr.labels):
            ignored_prs.append(body)
            continue

        matched = False
        for category, entries in categorized:
            if have_common_elements(category.labels, pr.labels):
                entries.append(body)
                matched = True

        if matched:
            categorized_prs.append(body)
        else:
            if catch_all is not None:
                catch_all.append(body)
            uncategorized_prs.append(body)

    logger.info("Ordered all pull requests into %d categories", len(categorized))

    changelog = ""
    for category, entries in categorized:
        if not entries:
            continue
        changelog += f"{category.title}\n\n"
        changelog += "".join(f"{entry}\n" for entry in entries)
        changelog += "\n"
    logger.info("Wrote %d categorized pull requests down", len(categorized_prs))

    changelog_uncategorized = "".join(f"{entry}\n" for entry in uncategorized_prs)
    logger.info("Wrote %d non categorized pull requests down", len(uncategorized_prs))

    changelog_ignored = "".join(f"{entry}\n" for entry in ignored_prs)
    logger.info("Wrote %d ignored pull requests down", len(ignored_prs))

    document = config.template
    document = fill_placeholder(document, "CHANGELOG", changelog)
    document = fill_placeholder(document, "UNCATEGORIZED", changelog_uncategorized)
    document = fill_placeholder(document, "IGNORED", changelog_ignored)
    document = fill_placeholder(document, "CATEGORIZED_COUNT", str(len(categorized_prs)))
    document = fill_placeholder(document, "UNCATEGORIZED_COUNT", str(len(uncategorized_prs)))
    document = fill_placeholder(document, "IGNORED_COUNT", str(len(ignored_prs)))
    document = fill_additional_placeholders(document, options)

    logger.info("Filled template")
    return document


def fill_additional_placeholders(text: str, options: ReleaseNotesOptions) -> str:
    """Fill the repository and tag placeholders."""
    text = fill_placeholder(text, "OWNER", options.owner)
    text = fill_placeholder(text, "REPO", options.repo)
    text = fill_placeholder(text, "FROM_TAG", options.from_tag)
    text = fill_placeholder(text, "TO_TAG", options.to_tag)
    return text
