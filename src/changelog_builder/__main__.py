"""Allow running as ``python -m changelog_builder``."""

from changelog_builder.cli.app import app

app()
