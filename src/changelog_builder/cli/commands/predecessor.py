"""Implementation of the 'predecessor' command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from changelog_builder.core.tags import find_predecessor_tag
from changelog_builder.exceptions import GitHubApiError
from changelog_builder.vcs import GitHubClient

if TYPE_CHECKING:
    from rich.console import Console


def run_predecessor(
    owner: str,
    repo: str,
    tag: str,
    ignore_pre_releases: bool,
    max_tags: int,
    token: str | None,
    api_url: str,
    console: Console,
    err_console: Console,
) -> None:
    """Print the name of the tag released before ``tag``."""
    client = GitHubClient(token=token, api_url=api_url)

    try:
        tags = client.get_tags(owner, repo, max_tags)
    except GitHubApiError as e:
        err_console.print(f"[red]Error fetching tags:[/] {e}")
        raise SystemExit(1) from e

    found = find_predecessor_tag(tags, tag, ignore_pre_releases)
    if found is None:
        err_console.print(f"[yellow]No tag found before {tag}.[/]")
        raise SystemExit(1)

    console.print(found.name, markup=False, highlight=False)
