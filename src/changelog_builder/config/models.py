"""Pydantic models for changelog-builder configuration.

Every option falls back to a default when it is absent. Empty strings are
treated as absent; explicitly empty lists are kept, so ``ignore_labels: []``
disables ignoring instead of restoring the default.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_SORT = "DESC"
DEFAULT_TEMPLATE = "${{CHANGELOG}}"
DEFAULT_PR_TEMPLATE = "- ${{TITLE}}\n   - PR: #${{NUMBER}}"
DEFAULT_IGNORE_LABELS = ["ignore"]
DEFAULT_MAX_TAGS_TO_FETCH = 200


class Category(BaseModel):
    """A section of the changelog.

    A category without labels is the catch-all for pull requests that match
    no other category.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str
    labels: list[str] = Field(default_factory=list)


def default_categories() -> list[Category]:
    return [
        Category(title="## 🚀 Features", labels=["feature"]),
        Category(title="## 🐛 Fixes", labels=["fix"]),
        Category(title="## 🧪 Tests", labels=["test"]),
    ]


class Transformer(BaseModel):
    """A find/replace rule applied to rendered pull request text."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str
    target: str = ""


class Extractor(Transformer):
    """A rule deriving an extra label from a pull request field.

    ``on_property`` is kept as a plain string so that an unknown property
    degrades to the body field at extraction time instead of failing the
    whole configuration.
    """

    on_property: str | None = None


class Configuration(BaseModel):
    """Root configuration for building a changelog."""

    model_config = ConfigDict(extra="ignore")

    sort: str = DEFAULT_SORT
    template: str = DEFAULT_TEMPLATE
    pr_template: str = DEFAULT_PR_TEMPLATE
    categories: list[Category] = Field(default_factory=default_categories)
    ignore_labels: list[str] = Field(default_factory=lambda: list(DEFAULT_IGNORE_LABELS))
    label_extractor: list[Extractor] = Field(default_factory=list)
    transformers: list[Transformer] = Field(default_factory=list)
    max_tags_to_fetch: int = Field(default=DEFAULT_MAX_TAGS_TO_FETCH, ge=1)
    exclude_merge_branches: list[str] = Field(default_factory=list)

    @field_validator("sort", "template", "pr_template", mode="before")
    @classmethod
    def _empty_string_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            return cls.model_fields[info.field_name].default
        return value

    @field_validator(
        "categories",
        "ignore_labels",
        "label_extractor",
        "transformers",
        "exclude_merge_branches",
        mode="before",
    )
    @classmethod
    def _none_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    @property
    def sort_ascending(self) -> bool:
        """True when pull requests are listed oldest merge first."""
        return self.sort.upper() == "ASC"
