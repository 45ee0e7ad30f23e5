"""Regex rules, label extraction and pull request templates.

Patterns and replacement targets come from user configuration and are
written the way release-notes configs are usually shared: replacement
targets reference groups as ``$1`` or ``$<name>``, and named groups may be
written ``(?<name>...)``. Both are translated here. A rule whose pattern
does not compile is dropped with a warning; it never aborts the run.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import UTC
from typing import TYPE_CHECKING

from changelog_builder.config.models import Extractor

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from datetime import datetime

    from changelog_builder.config.models import Transformer
    from changelog_builder.core.pull_requests import PullRequestInfo

logger = logging.getLogger(__name__)

_TARGET_TOKEN = re.compile(r"\$(\$|&|\d{1,2}|<([^>]*)>)")


@dataclass(frozen=True)
class RegexTransformer:
    """A compiled find/replace rule.

    ``pattern`` is None when the rule failed to compile.
    """

    pattern: re.Pattern[str] | None
    target: str
    on_property: str | None = None

    def replace(self, text: str) -> str:
        """Replace every match in ``text`` with the expanded target."""
        if self.pattern is None:
            return text
        return self.pattern.sub(lambda match: expand_target(self.target, match), text)


def expand_target(target: str, match: re.Match[str]) -> str:
    """Expand ``$1``, ``$<name>``, ``$&`` and ``$$`` in a replacement target.

    Backslashes are literal. References to groups that do not exist are left
    as written; groups that did not participate expand to an empty string.
    ``$<name>`` is only a reference when the pattern has named groups, in
    which case an unknown name expands to an empty string.
    """
    groups = match.re.groups
    named = match.re.groupindex

    def replace(token: re.Match[str]) -> str:
        ref = token.group(1)
        if ref == "$":
            return "$"
        if ref == "&":
            return match.group(0)
        name = token.group(2)
        if name is not None:
            if not named:
                return token.group(0)
            return (match.group(name) if name in named else None) or ""

        index = int(ref)
        if 0 < index <= groups:
            return match.group(index) or ""
        # "$12" with a single group means group 1 followed by "2"
        if len(ref) == 2 and 0 < int(ref[0]) <= groups:
            return (match.group(int(ref[0])) or "") + ref[1]
        return token.group(0)

    return _TARGET_TOKEN.sub(replace, target)


def compile_pattern(source: str) -> re.Pattern[str]:
    """Compile a user pattern.

    A single escaped backslash is collapsed first, so configs that
    double-escape their patterns keep working.
    """
    source = source.replace("\\\\", "\\", 1)
    return re.compile(python_named_groups(source), re.UNICODE)


def python_named_groups(source: str) -> str:
    """Rewrite ``(?<name>`` group openers to Python's ``(?P<name>``.

    Escaped parentheses and the contents of character classes are left
    alone, as are lookbehinds (``(?<=`` and ``(?<!``).
    """
    out: list[str] = []
    in_class = False
    i = 0

    while i < len(source):
        char = source[i]
        if char == "\\":
            out.append(source[i : i + 2])
            i += 2
            continue

        if in_class:
            if char == "]":
                in_class = False
        elif char == "[":
            in_class = True
            # "]" right after "[" or "[^" is a literal member
            j = i + 1
            if source[j : j + 1] == "^":
                j += 1
            if source[j : j + 1] == "]":
                j += 1
            out.append(source[i:j])
            i = j
            continue
        elif source.startswith("(?<", i) and source[i + 3 : i + 4] not in ("=", "!"):
            out.append("(?P<")
            i += 3
            continue

        out.append(char)
        i += 1

    return "".join(out)


def validate_transformers(rules: Iterable[Transformer] | None) -> list[RegexTransformer]:
    """Compile rules, dropping the ones whose pattern is invalid.

    Args:
        rules: Transformer or Extractor rules; None means no rules

    Returns:
        Compiled rules, in configured order
    """
    compiled: list[RegexTransformer] = []

    for rule in rules or []:
        on_property = rule.on_property if isinstance(rule, Extractor) else None
        try:
            pattern = compile_pattern(rule.pattern)
        except re.error as e:
            logger.warning("Bad replacer regex: %s (%s)", rule.pattern, e)
            continue
        compiled.append(RegexTransformer(pattern=pattern, target=rule.target, on_property=on_property))

    return compiled


def transform(text: str, transformers: Sequence[RegexTransformer]) -> str:
    """Apply transformers in order, each working on the previous result."""
    for transformer in transformers:
        text = transformer.replace(text)
    return text


_PROPERTY_ACCESSORS: dict[str, Callable[[PullRequestInfo], str | None]] = {
    "title": lambda pr: pr.title,
    "author": lambda pr: pr.author,
    "milestone": lambda pr: pr.milestone,
    "body": lambda pr: pr.body,
}


def _source_value(pr: PullRequestInfo, on_property: str | None) -> str:
    if on_property is None:
        return pr.body

    accessor = _PROPERTY_ACCESSORS.get(on_property)
    value = accessor(pr) if accessor is not None else None
    if value is None:
        logger.warning(
            "The provided property '%s' for `label_extractor` is not valid", on_property
        )
        return pr.body
    return value


def extract_labels(
    pull_requests: Sequence[PullRequestInfo],
    extractors: Iterable[Extractor] | None,
) -> Sequence[PullRequestInfo]:
    """Derive additional labels from pull request fields.

    For every rule and pull request, the rule's property (body by default) is
    matched against the rule pattern. On a match the pattern is replaced by
    the target and the non-empty result is appended as a label.

    Labels are appended in place; the same sequence is returned.
    """
    for extractor in validate_transformers(extractors):
        for pr in pull_requests:
            value = _source_value(pr, extractor.on_property)
            if extractor.pattern is None or not extractor.pattern.search(value):
                continue
            label = extractor.replace(value)
            if label:
                pr.labels.append(label)

    return pull_requests


def iso_timestamp(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds, e.g. ``2020-01-01T12:00:00.000Z``."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def placeholder(name: str) -> re.Pattern[str]:
    """Pattern for ``${{NAME}}``, also accepting the bare ``{{NAME}}`` form."""
    return re.compile(r"\$?\{\{" + re.escape(name) + r"\}\}")


def fill_placeholder(text: str, name: str, value: str) -> str:
    """Replace every occurrence of a placeholder with ``value``, taken literally."""
    return placeholder(name).sub(lambda _: value, text)


def fill_template(pr: PullRequestInfo, template: str) -> str:
    """Fill the pull request placeholders of ``template``.

    Unknown placeholders are left untouched.
    """
    values = {
        "NUMBER": str(pr.number),
        "TITLE": pr.title,
        "URL": pr.html_url,
        "MERGED_AT": iso_timestamp(pr.merged_at),
        "AUTHOR": pr.author,
        "LABELS": ", ".join(pr.labels),
        "MILESTONE": pr.milestone or "",
        "BODY": pr.body,
        "ASSIGNEES": ", ".join(pr.assignees),
        "REVIEWERS": ", ".join(pr.requested_reviewers),
    }

    filled = template
    for name, value in values.items():
        filled = fill_placeholder(filled, name, value)
    return filled
