"""Tag ordering and predecessor resolution.

Tags are ordered newest first, for example::

    2020.4.0
    2020.4.0-rc02
    2020.3.2
    2020.3.1
    2020.3.1-rc03
    2020.3.1-rc02
    2020.3.1-rc01
    2020.3.1-b01
    2020.3.1-a01
    2020.3.0

The comparison is lexical on purpose: ``10`` sorts before ``9``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagInfo:
    """A tag and the commit it points to."""

    name: str
    commit: str


def _locale_compare(a: str, b: str) -> int:
    # Case-insensitive first; ties put lowercase before uppercase.
    key_a = (a.casefold(), a.swapcase())
    key_b = (b.casefold(), b.swapcase())
    return (key_a > key_b) - (key_a < key_b)


def compare_tags(a: str, b: str) -> int:
    """Compare two tag names.

    Args:
        a: First tag name
        b: Second tag name

    Returns:
        -1 if ``a`` is older than ``b``, 1 if newer, 0 if equivalent
    """
    core_a, dash_a, suffix_a = a.removeprefix("v").partition("-")
    core_b, dash_b, suffix_b = b.removeprefix("v").partition("-")

    result = _locale_compare(core_a, core_b)
    if result != 0:
        return result

    # A full release is newer than any of its pre-releases
    if not dash_a and not dash_b:
        return 0
    if not dash_a:
        return 1
    if not dash_b:
        return -1
    return _locale_compare(suffix_a, suffix_b)


def sort_tags(tags: Iterable[TagInfo]) -> list[TagInfo]:
    """Return tags sorted newest first."""
    return sorted(tags, key=cmp_to_key(lambda x, y: compare_tags(x.name, y.name)), reverse=True)


def compare_releases(a: str, b: str) -> int:
    """Compare only the release part of two tag names, ignoring qualifiers."""
    return _locale_compare(_release_part(a), _release_part(b))


def _release_part(name: str) -> str:
    return name.removeprefix("v").partition("-")[0]


def is_pre_release(name: str) -> bool:
    """Pre-release tags carry a ``-`` qualifier, e.g. ``1.2.0-rc1``."""
    return "-" in name


def find_predecessor_tag(
    tags: Iterable[TagInfo],
    tag: str,
    ignore_pre_releases: bool = False,
) -> TagInfo | None:
    """Find the tag released right before ``tag``.

    Tags are ordered newest release first. Tags of the same release keep the
    order they were given in, which for the GitHub API is newest first.

    Args:
        tags: Candidate tags
        tag: Name of the tag to find the predecessor for
        ignore_pre_releases: Skip pre-release tags when searching

    Returns:
        The predecessor tag. If ``tag`` is unknown the newest tag is returned;
        None if there is no predecessor or no tags at all.
    """
    try:
        ordered = sorted(
            tags, key=cmp_to_key(lambda x, y: compare_releases(x.name, y.name)), reverse=True
        )
    except Exception:
        logger.exception("Failed to sort tags")
        return None

    if not ordered:
        return None

    wanted = tag.lower()
    for index, candidate in enumerate(ordered):
        if candidate.name.lower() != wanted:
            continue

        if ignore_pre_releases:
            logger.info("Enabled 'ignore_pre_releases', searching for the closest release")
            return next((t for t in ordered[index + 1 :] if not is_pre_release(t.name)), None)

        return ordered[index + 1] if index + 1 < len(ordered) else None

    return ordered[0]
