"""Configuration management for changelog-builder."""

from __future__ import annotations

from changelog_builder.config.loader import find_config, load_config
from changelog_builder.config.models import (
    Category,
    Configuration,
    Extractor,
    Transformer,
)

__all__ = [
    "Category",
    "Configuration",
    "Extractor",
    "Transformer",
    "find_config",
    "load_config",
]
