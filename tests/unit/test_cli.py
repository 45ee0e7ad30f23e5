"""Tests for the command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from changelog_builder.cli.app import app
from changelog_builder.config.models import DEFAULT_MAX_TAGS_TO_FETCH
from changelog_builder.core.tags import TagInfo
from changelog_builder.exceptions import GitHubApiError
from changelog_builder.vcs.github import DEFAULT_API_URL

runner = CliRunner()


@pytest.fixture
def prs_file(tmp_path: Path) -> Path:
    path = tmp_path / "prs.json"
    path.write_text(
        json.dumps(
            [
                {
                    "number": 1,
                    "title": "Add export",
                    "html_url": "https://github.com/o/r/pull/1",
                    "merged_at": "2024-01-01T00:00:00Z",
                    "user": {"login": "octocat"},
                    "labels": [{"name": "feature"}],
                },
                {
                    "number": 2,
                    "title": "Closed without merge",
                    "merged_at": None,
                },
            ]
        )
    )
    return path


class TestRenderCommand:
    """Tests for 'changelog-builder render'."""

    def test_render_to_file(self, prs_file: Path, tmp_path: Path):
        """Render writes the document to the output file."""
        output = tmp_path / "notes.md"

        result = runner.invoke(app, ["render", "--prs", str(prs_file), "--to-tag", "v1.0.0", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_text() == "## 🚀 Features\n\n- Add export\n   - PR: #1\n\n"

    def test_render_with_config(self, prs_file: Path, tmp_path: Path):
        config = tmp_path / "changelog-builder.json"
        config.write_text(json.dumps({"template": "${{TO_TAG}}: ${{CATEGORIZED_COUNT}}"}))
        output = tmp_path / "notes.md"

        result = runner.invoke(
            app,
            ["render", "--prs", str(prs_file), "--to-tag", "v1.0.0", "-c", str(config), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert output.read_text() == "v1.0.0: 1"

    def test_render_missing_config(self, prs_file: Path, tmp_path: Path):
        result = runner.invoke(
            app, ["render", "--prs", str(prs_file), "--to-tag", "v1", "-c", str(tmp_path / "none.json")]
        )

        assert result.exit_code == 1

    def test_render_config_not_utf8(self, prs_file: Path, tmp_path: Path):
        config = tmp_path / "bad.json"
        config.write_bytes(b'{"sort": "\xff"}')

        result = runner.invoke(app, ["render", "--prs", str(prs_file), "--to-tag", "v1", "-c", str(config)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_render_bad_prs_file(self, tmp_path: Path):
        bad = tmp_path / "prs.json"
        bad.write_text("not json")

        result = runner.invoke(app, ["render", "--prs", str(bad), "--to-tag", "v1"])

        assert result.exit_code == 1


class TestBuildCommand:
    """Tests for 'changelog-builder build'."""

    def test_build_prints_document(self):
        with patch(
            "changelog_builder.cli.commands.build.pull_release_notes", return_value="RELEASE NOTES"
        ) as mock_pull:
            result = runner.invoke(app, ["build", "--owner", "o", "--repo", "r", "--to-tag", "v2"])

        assert result.exit_code == 0, result.output
        assert "RELEASE NOTES" in result.output
        assert mock_pull.call_args[1]["from_tag"] is None

    def test_build_nothing_found(self):
        with patch("changelog_builder.cli.commands.build.pull_release_notes", return_value=None):
            result = runner.invoke(app, ["build", "--owner", "o", "--repo", "r", "--to-tag", "v2"])

        assert result.exit_code == 1

    def test_build_api_error(self):
        with patch(
            "changelog_builder.cli.commands.build.pull_release_notes",
            side_effect=GitHubApiError("GET failed", status_code=500),
        ):
            result = runner.invoke(app, ["build", "--owner", "o", "--repo", "r", "--to-tag", "v2"])

        assert result.exit_code == 1


class TestPredecessorCommand:
    """Tests for 'changelog-builder predecessor'."""

    def test_prints_predecessor(self):
        with patch("changelog_builder.cli.commands.predecessor.GitHubClient") as mock_client_cls:
            mock_client_cls.return_value.get_tags.return_value = [
                TagInfo("v2.0.0", "b"),
                TagInfo("v1.0.0", "a"),
            ]
            result = runner.invoke(app, ["predecessor", "--owner", "o", "--repo", "r", "--tag", "v2.0.0"])

        assert result.exit_code == 0, result.output
        assert "v1.0.0" in result.output
        mock_client_cls.return_value.get_tags.assert_called_once_with("o", "r", 200)

    def test_defaults_from_constants(self):
        """Without options the default API URL and tag limit are used."""
        with patch("changelog_builder.cli.commands.predecessor.GitHubClient") as mock_client_cls:
            mock_client_cls.return_value.get_tags.return_value = [TagInfo("v1.0.0", "a")]
            runner.invoke(
                app,
                ["predecessor", "--owner", "o", "--repo", "r", "--tag", "v1.0.0"],
                env={"GITHUB_API_URL": None, "GITHUB_TOKEN": None},
            )

        mock_client_cls.assert_called_once_with(token=None, api_url=DEFAULT_API_URL)
        mock_client_cls.return_value.get_tags.assert_called_once_with(
            "o", "r", DEFAULT_MAX_TAGS_TO_FETCH
        )

    def test_no_predecessor(self):
        with patch("changelog_builder.cli.commands.predecessor.GitHubClient") as mock_client_cls:
            mock_client_cls.return_value.get_tags.return_value = []
            result = runner.invoke(app, ["predecessor", "--owner", "o", "--repo", "r", "--tag", "v1"])

        assert result.exit_code == 1


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "changelog-builder" in result.output
