"""changelog-builder command-line application."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from changelog_builder import __version__
from changelog_builder.config.models import DEFAULT_MAX_TAGS_TO_FETCH
from changelog_builder.vcs.github import DEFAULT_API_URL

app = typer.Typer(
    name="changelog-builder",
    help="Build categorized release notes from GitHub pull requests.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"changelog-builder {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version."),
    ] = False,
) -> None:
    """Build categorized release notes from GitHub pull requests."""


Owner = Annotated[str, typer.Option("--owner", help="Repository owner.")]
Repo = Annotated[str, typer.Option("--repo", help="Repository name.")]
ConfigPath = Annotated[
    Path | None, typer.Option("--config", "-c", help="Configuration file (JSON or TOML).")
]
Token = Annotated[
    str | None, typer.Option("--token", envvar="GITHUB_TOKEN", help="GitHub token.")
]
ApiUrl = Annotated[
    str, typer.Option("--api-url", envvar="GITHUB_API_URL", help="GitHub API base URL.")
]
IgnorePreReleases = Annotated[
    bool, typer.Option("--ignore-pre-releases", help="Skip pre-release tags as predecessors.")
]
Output = Annotated[
    Path | None, typer.Option("--output", "-o", help="Write the release notes to a file.")
]
Verbose = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


@app.command()
def build(
    owner: Owner,
    repo: Repo,
    to_tag: Annotated[str, typer.Option("--to-tag", help="Tag of the release.")],
    from_tag: Annotated[
        str | None, typer.Option("--from-tag", help="Previous tag; resolved if omitted.")
    ] = None,
    config: ConfigPath = None,
    token: Token = None,
    api_url: ApiUrl = DEFAULT_API_URL,
    ignore_pre_releases: IgnorePreReleases = False,
    output: Output = None,
    verbose: Verbose = False,
) -> None:
    """Build release notes for a tag range from the GitHub API."""
    from changelog_builder.cli.commands.build import run_build

    configure_logging(verbose)
    run_build(
        owner=owner,
        repo=repo,
        from_tag=from_tag,
        to_tag=to_tag,
        config_path=config,
        token=token,
        api_url=api_url,
        ignore_pre_releases=ignore_pre_releases,
        output=output,
        console=console,
        err_console=err_console,
    )


@app.command()
def render(
    prs: Annotated[Path, typer.Option("--prs", help="JSON file with pull requests.")],
    to_tag: Annotated[str, typer.Option("--to-tag", help="Tag of the release.")],
    from_tag: Annotated[str, typer.Option("--from-tag", help="Previous tag.")] = "",
    owner: Annotated[str, typer.Option("--owner", help="Repository owner.")] = "",
    repo: Annotated[str, typer.Option("--repo", help="Repository name.")] = "",
    config: ConfigPath = None,
    output: Output = None,
    verbose: Verbose = False,
) -> None:
    """Build release notes from pull requests stored in a local JSON file."""
    from changelog_builder.cli.commands.build import run_render

    configure_logging(verbose)
    run_render(
        prs_path=prs,
        owner=owner,
        repo=repo,
        from_tag=from_tag,
        to_tag=to_tag,
        config_path=config,
        output=output,
        console=console,
        err_console=err_console,
    )


@app.command()
def predecessor(
    owner: Owner,
    repo: Repo,
    tag: Annotated[str, typer.Option("--tag", help="Tag to find the predecessor of.")],
    ignore_pre_releases: IgnorePreReleases = False,
    max_tags: Annotated[
        int, typer.Option("--max-tags", min=1, help="Maximum number of tags to fetch.")
    ] = DEFAULT_MAX_TAGS_TO_FETCH,
    token: Token = None,
    api_url: ApiUrl = DEFAULT_API_URL,
    verbose: Verbose = False,
) -> None:
    """Print the tag released before the given tag."""
    from changelog_builder.cli.commands.predecessor import run_predecessor

    configure_logging(verbose)
    run_predecessor(
        owner=owner,
        repo=repo,
        tag=tag,
        ignore_pre_releases=ignore_pre_releases,
        max_tags=max_tags,
        token=token,
        api_url=api_url,
        console=console,
        err_console=err_console,
    )
