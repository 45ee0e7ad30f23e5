"""Implementation of the 'build' and 'render' commands.

'build' pulls tags, commits and pull requests from GitHub; 'render' reads
pull requests from a local JSON file (GitHub REST format) and never touches
the network.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from changelog_builder.config import load_config
from changelog_builder.core.changelog import ReleaseNotesOptions, build_changelog
from changelog_builder.core.pull_requests import PullRequestInfo
from changelog_builder.core.release_notes import pull_release_notes
from changelog_builder.exceptions import ChangelogBuilderError
from changelog_builder.vcs import GitHubClient

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console

    from changelog_builder.config.models import Configuration


def _load_config(config_path: Path | None, err_console: Console) -> Configuration:
    try:
        return load_config(config_path)
    except ChangelogBuilderError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e


def _deliver(document: str, output: Path | None, console: Console) -> None:
    if output is None:
        console.print(document, markup=False, highlight=False, soft_wrap=True)
        return
    output.write_text(document, encoding="utf-8")
    console.print(f"  [green]✓[/] Wrote release notes to {output}")


def run_build(
    owner: str,
    repo: str,
    from_tag: str | None,
    to_tag: str,
    config_path: Path | None,
    token: str | None,
    api_url: str,
    ignore_pre_releases: bool,
    output: Path | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the build command.

    Args:
        owner: Repository owner
        repo: Repository name
        from_tag: Previous tag; resolved from the tag list if None
        to_tag: Tag of the release
        config_path: Optional configuration file
        token: GitHub token
        api_url: GitHub API base URL
        ignore_pre_releases: Skip pre-release tags when resolving from_tag
        output: File to write to; stdout if None
        console: Console for standard output
        err_console: Console for error output
    """
    config = _load_config(config_path, err_console)
    client = GitHubClient(token=token, api_url=api_url)

    try:
        document = pull_release_notes(
            client,
            config,
            owner=owner,
            repo=repo,
            to_tag=to_tag,
            from_tag=from_tag,
            ignore_pre_releases=ignore_pre_releases,
        )
    except ChangelogBuilderError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    if document is None:
        err_console.print(
            f"[yellow]No release notes for {owner}/{repo} {from_tag or '?'}...{to_tag}.[/]"
        )
        raise SystemExit(1)

    _deliver(document, output, console)


def load_pull_requests(path: Path) -> list[PullRequestInfo]:
    """Read merged pull requests from a JSON list of GitHub pull request payloads.

    Unmerged entries are skipped.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return [PullRequestInfo.from_api(item) for item in data if item.get("merged_at")]


def run_render(
    prs_path: Path,
    owner: str,
    repo: str,
    from_tag: str,
    to_tag: str,
    config_path: Path | None,
    output: Path | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the render command."""
    config = _load_config(config_path, err_console)

    try:
        pull_requests = load_pull_requests(prs_path)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        err_console.print(f"[red]Error reading pull requests:[/] {e}")
        raise SystemExit(1) from e

    options = ReleaseNotesOptions(owner=owner, repo=repo, from_tag=from_tag, to_tag=to_tag)
    _deliver(build_changelog(pull_requests, config, options), output, console)
