"""Tests for pulling release notes through a GitHub client."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from conftest import make_commit, make_pr

from changelog_builder.config.models import Configuration
from changelog_builder.core.commits import DiffInfo
from changelog_builder.core.release_notes import pull_release_notes, resolve_from_tag
from changelog_builder.core.tags import TagInfo
from changelog_builder.vcs.github import GitHubClient


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock(spec=GitHubClient)
    client.get_tags.return_value = [TagInfo("v1.1.0", "b"), TagInfo("v1.0.0", "a")]
    client.get_diff.return_value = DiffInfo(
        commits=3,
        commit_info=[
            make_commit("a", 1, "Merge branch 'main' into feature"),
            make_commit("b", 2, "feat: export"),
            make_commit("c", 5, "fix: crash"),
        ],
    )
    client.get_merged_pull_requests.return_value = [
        make_pr(2, labels=["feature"], title="Export"),
        make_pr(5, labels=["fix"], title="Crash"),
    ]
    return client


class TestResolveFromTag:
    """Tests for resolve_from_tag()."""

    def test_resolves_predecessor(self, mock_client: MagicMock):
        config = Configuration(max_tags_to_fetch=50)

        assert resolve_from_tag(mock_client, config, "o", "r", "v1.1.0") == "v1.0.0"
        mock_client.get_tags.assert_called_once_with("o", "r", 50)

    def test_no_predecessor(self, mock_client: MagicMock):
        assert resolve_from_tag(mock_client, Configuration(), "o", "r", "v1.0.0") is None


class TestPullReleaseNotes:
    """Tests for pull_release_notes()."""

    def test_with_from_tag(self, mock_client: MagicMock):
        """Tags are not fetched when from_tag is given."""
        config = Configuration(template="${{FROM_TAG}}..${{TO_TAG}}\n${{CHANGELOG}}")

        result = pull_release_notes(mock_client, config, "o", "r", to_tag="v1.1.0", from_tag="v1.0.0")

        assert result is not None
        assert result.startswith("v1.0.0..v1.1.0\n## 🚀 Features\n\n- Export\n")
        assert "- Crash" in result
        mock_client.get_tags.assert_not_called()
        mock_client.get_diff.assert_called_once_with("o", "r", "v1.0.0", "v1.1.0")

    def test_resolves_missing_from_tag(self, mock_client: MagicMock):
        config = Configuration(template="${{FROM_TAG}}")

        assert pull_release_notes(mock_client, config, "o", "r", to_tag="v1.1.0") == "v1.0.0"

    def test_no_previous_tag(self, mock_client: MagicMock):
        """No predecessor means no release notes."""
        mock_client.get_tags.return_value = []

        assert pull_release_notes(mock_client, Configuration(), "o", "r", to_tag="v1.0.0") is None
        mock_client.get_diff.assert_not_called()

    def test_commit_window(self, mock_client: MagicMock):
        """Pull requests are fetched for the window of the remaining commits."""
        config = Configuration(exclude_merge_branches=["Merge branch"])

        pull_release_notes(mock_client, config, "o", "r", to_tag="v1.1.0", from_tag="v1.0.0")

        kwargs = mock_client.get_merged_pull_requests.call_args[1]
        assert kwargs["since"].day == 2
        assert kwargs["until"].day == 5

    def test_no_commits(self, mock_client: MagicMock):
        mock_client.get_diff.return_value = DiffInfo()

        result = pull_release_notes(mock_client, Configuration(), "o", "r", to_tag="v1.1.0", from_tag="v1.0.0")

        assert result is None
        mock_client.get_merged_pull_requests.assert_not_called()
