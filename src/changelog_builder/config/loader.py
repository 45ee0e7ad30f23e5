"""Configuration loading.

Configuration is read from a JSON file (the format release-notes configs are
usually shared in) or from a TOML file. In TOML the
``[tool.changelog-builder]`` table is used when present, which lets the
configuration live in a project's pyproject.toml.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from changelog_builder.config.models import Configuration
from changelog_builder.exceptions import ConfigNotFoundError, ConfigValidationError

CONFIG_FILE_NAME = "changelog-builder.json"
TOOL_TABLE = "changelog-builder"


def find_config(start_path: Path | None = None) -> Path:
    """Find changelog-builder.json by walking up the directory tree.

    Args:
        start_path: Directory to start searching from (default: cwd)

    Returns:
        Path to the configuration file

    Raises:
        ConfigNotFoundError: If no configuration file is found
    """
    current = (start_path or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            raise ConfigNotFoundError(
                f"No {CONFIG_FILE_NAME} found in {start_path or Path.cwd()} or any parent directory"
            )
        current = parent


def load_config_data(path: Path) -> dict[str, Any]:
    """Read the raw configuration mapping from a JSON or TOML file.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file can't be parsed
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigValidationError(f"Invalid encoding in {path}: {e}") from e

    if path.suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e
        return extract_tool_config(data)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(f"Configuration in {path} must be an object")
    return data


def extract_tool_config(data: dict[str, Any]) -> dict[str, Any]:
    """Return the [tool.changelog-builder] table, or the whole document."""
    tool_config = data.get("tool", {}).get(TOOL_TABLE)
    if tool_config is None:
        return data
    return tool_config


def load_config(path: Path | None = None) -> Configuration:
    """Load and validate configuration.

    Args:
        path: Configuration file; None yields the defaults

    Returns:
        Validated Configuration

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If validation fails
    """
    if path is None:
        return Configuration()

    data = load_config_data(path)

    try:
        return Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {path}:\n{e}") from e
