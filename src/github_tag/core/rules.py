"""Release rules: which commit types bump what, and where they show up in the changelog.

Operators extend or override the built-in table with ``custom_release_rules``,
a comma-separated list of ``<type>:<release>[:<section>]`` entries such as
``hotfix:patch,pre-feat:preminor:Upcoming Features``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

from github_tag.core.version import SUPPORTED_RELEASE_TYPES, ReleaseType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

RULE_SEPARATOR = ","
FIELD_SEPARATOR = ":"


@dataclass(frozen=True)
class ReleaseRule:
    """Maps a commit type to a release type and a changelog section.

    Attributes:
        type: Commit type keyword (``feat``, ``fix``, ...)
        release: Release triggered by the commit type, ``None`` for no release
        section: Changelog heading, ``None`` to keep the type out of the changelog
    """

    type: str
    release: ReleaseType | None = None
    section: str | None = None


DEFAULT_CHANGELOG_RULES: Mapping[str, ReleaseRule] = MappingProxyType(
    {
        "feat": ReleaseRule("feat", ReleaseType.MINOR, "Features"),
        "fix": ReleaseRule("fix", ReleaseType.PATCH, "Bug Fixes"),
        "perf": ReleaseRule("perf", ReleaseType.PATCH, "Performance Improvements"),
        "revert": ReleaseRule("revert", ReleaseType.PATCH, "Reverts"),
        "docs": ReleaseRule("docs", None, "Documentation"),
        "style": ReleaseRule("style", None, "Styles"),
        "refactor": ReleaseRule("refactor", None, "Code Refactoring"),
        "test": ReleaseRule("test", None, "Tests"),
        "build": ReleaseRule("build", None, "Build Systems"),
        "ci": ReleaseRule("ci", None, "Continuous Integration"),
    }
)


@dataclass(frozen=True)
class ReleaseRuleTable:
    """Merged rule table handed to the commit analyzer and the notes generator."""

    rules: tuple[ReleaseRule, ...]

    def analysis_rules(self) -> tuple[ReleaseRule, ...]:
        """All rules, including the ones hidden from the changelog."""
        return self.rules

    def changelog_types(self) -> tuple[ReleaseRule, ...]:
        """Rules that have a changelog section, in table order."""
        return tuple(rule for rule in self.rules if rule.section)

    def get(self, commit_type: str) -> ReleaseRule | None:
        return next((rule for rule in self.rules if rule.type == commit_type), None)

    def __len__(self) -> int:
        return len(self.rules)


def _parse_rule(entry: str) -> ReleaseRule | None:
    parts = entry.split(FIELD_SEPARATOR)
    if len(parts) < 2:
        logger.warning("%s is not a valid custom release definition.", entry)
        return None

    commit_type, release = parts[0].strip(), parts[1].strip()
    section = parts[2].strip() if len(parts) > 2 else ""

    if release not in SUPPORTED_RELEASE_TYPES:
        logger.warning("%s is not a valid release type.", release)
        return None

    default_rule = DEFAULT_CHANGELOG_RULES.get(commit_type.lower())
    if not section:
        logger.debug("%s doesn't mention the section for the changelog.", entry)
        if default_rule and default_rule.section:
            logger.debug("Default section (%s) will be used instead.", default_rule.section)
        else:
            logger.debug("The commits matching this rule won't be included in the changelog.")

    return ReleaseRule(
        type=commit_type,
        release=ReleaseType(release),
        section=section or (default_rule.section if default_rule else None),
    )


def parse_release_rules(custom_release_rules: str | None) -> tuple[ReleaseRule, ...]:
    """Parse ``custom_release_rules``, dropping invalid entries with a warning.

    Args:
        custom_release_rules: Comma-separated ``type:release[:section]`` entries

    Returns:
        Valid rules in the order given
    """
    if not custom_release_rules:
        return ()

    rules = []
    for entry in custom_release_rules.split(RULE_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue
        rule = _parse_rule(entry)
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


def merge_release_rules(custom_rules: Iterable[ReleaseRule] = ()) -> ReleaseRuleTable:
    """Overlay custom rules on the defaults, keyed by commit type.

    A custom rule replaces the release of the default rule with the same type
    and keeps its section unless it names one of its own.
    """
    merged: dict[str, ReleaseRule] = dict(DEFAULT_CHANGELOG_RULES)
    for rule in custom_rules:
        existing = merged.get(rule.type)
        if existing is None:
            merged[rule.type] = rule
        else:
            merged[rule.type] = replace(
                existing,
                release=rule.release,
                section=rule.section or existing.section,
            )
    return ReleaseRuleTable(tuple(merged.values()))
