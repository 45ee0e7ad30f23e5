"""changelog-builder: release notes from GitHub pull requests."""

from __future__ import annotations

__version__ = "0.1.0"
