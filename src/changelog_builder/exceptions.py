"""Exception hierarchy for changelog-builder.

The changelog core never raises for bad user rules or missing tags; these
exceptions belong to the configuration loader and the GitHub collaborator.
"""

from __future__ import annotations


class ChangelogBuilderError(Exception):
    """Base class for all changelog-builder errors."""


class ConfigError(ChangelogBuilderError):
    """Configuration could not be used."""


class ConfigNotFoundError(ConfigError):
    """Configuration file does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration file exists but its content is invalid."""


class GitHubApiError(ChangelogBuilderError):
    """A GitHub REST API request failed.

    Args:
        message: Human-readable description
        status_code: HTTP status of the failed response, if any
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
