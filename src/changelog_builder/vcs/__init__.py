"""Version control hosting integrations."""

from __future__ import annotations

from changelog_builder.vcs.github import GitHubClient

__all__ = ["GitHubClient"]
