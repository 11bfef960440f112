"""Ordered, validated view of a repository's tags.

Raw tags come straight from the GitHub API and may be anything: foreign
prefixes, non-semver names, or tags written in a custom ``version_format``.
``TagCatalog`` keeps only the tags that carry a version under the configured
prefix and orders them by semver precedence, highest first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from github_tag.core.version import (
    CANONICAL_FORMAT,
    NormalizeMode,
    normalize_prerelease_identifier,
    parse_canonical,
    to_canonical,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    import semver

logger = logging.getLogger(__name__)

HEAD_REF = "HEAD"


@dataclass(frozen=True)
class Tag:
    """A tag as reported by the repository."""

    name: str
    commit_sha: str


@dataclass(frozen=True)
class CatalogEntry:
    """A valid tag together with its canonical name and parsed version."""

    tag: Tag
    canonical_name: str
    version: semver.Version

    @property
    def is_prerelease(self) -> bool:
        return self.version.prerelease is not None

    @property
    def commit_sha(self) -> str:
        return self.tag.commit_sha


def compile_prefix(tag_prefix: str) -> re.Pattern[str]:
    """Compile the anchored pattern matching ``tag_prefix`` at the start of a name."""
    return re.compile(f"^{re.escape(tag_prefix)}")


def strip_prefix(name: str, prefix_pattern: re.Pattern[str]) -> str | None:
    """Return ``name`` without its prefix, or ``None`` if the prefix is absent."""
    match = prefix_pattern.match(name)
    if match is None:
        return None
    return name[match.end() :]


class TagCatalog:
    """Valid tags sorted in strictly descending semver precedence."""

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        prefix_pattern: re.Pattern[str],
        *,
        known_names: Iterable[str] = (),
    ) -> None:
        self._entries: tuple[CatalogEntry, ...] = tuple(entries)
        self._prefix_pattern = prefix_pattern
        names = {entry.tag.name for entry in self._entries}
        names.update(entry.canonical_name for entry in self._entries)
        self._names = frozenset(names.union(known_names))

    @classmethod
    def build(
        cls,
        tags: Iterable[Tag],
        prefix_pattern: re.Pattern[str],
        version_format: str = CANONICAL_FORMAT,
        *,
        identifier: str = "",
        remove_dot: bool = False,
    ) -> TagCatalog:
        """Validate and sort raw tags.

        Args:
            tags: Raw tags in any order
            prefix_pattern: Compiled pattern for the tag prefix
            version_format: Format the repository writes its tags in
            identifier: Pre-release identifier of the current lineage
            remove_dot: Tags are written as ``-rc1`` instead of ``-rc.1``

        Returns:
            Catalog holding only tags that match the prefix and parse as semver
        """
        valid: list[CatalogEntry] = []
        for tag in tags:
            remainder = strip_prefix(tag.name, prefix_pattern)
            version = None
            if remainder is not None:
                prefix = tag.name[: len(tag.name) - len(remainder)]
                canonical_name = to_canonical(tag.name, version_format, prefix)
                if remove_dot:
                    canonical_name = normalize_prerelease_identifier(
                        canonical_name, identifier, NormalizeMode.ADD
                    )
                version = parse_canonical(canonical_name, prefix)
            if version is None:
                logger.debug("Found invalid tag: %s", tag.name)
                continue

            logger.debug("Found valid tag: %s", tag.name)
            valid.append(CatalogEntry(tag=tag, canonical_name=canonical_name, version=version))

        # sorted() is stable, so the first tag seen wins among equal versions
        ordered = sorted(valid, key=lambda entry: entry.version, reverse=True)
        unique: list[CatalogEntry] = []
        for entry in ordered:
            if unique and unique[-1].version.compare(entry.version) == 0:
                logger.debug(
                    "Ignoring %s: same version as %s", entry.tag.name, unique[-1].tag.name
                )
                continue
            unique.append(entry)

        known_names = {name for entry in valid for name in (entry.tag.name, entry.canonical_name)}
        return cls(unique, prefix_pattern, known_names=known_names)

    @property
    def entries(self) -> tuple[CatalogEntry, ...]:
        return self._entries

    @property
    def prefix_pattern(self) -> re.Pattern[str]:
        return self._prefix_pattern

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, name: str) -> bool:
        """Whether a tag with this name (original or canonical) exists."""
        return name in self._names

    def latest_release(self) -> CatalogEntry | None:
        """Highest tag without a pre-release component."""
        return next((entry for entry in self._entries if not entry.is_prerelease), None)

    def latest_prerelease(self, identifier: str) -> CatalogEntry | None:
        """Highest pre-release tag whose pre-release part contains ``identifier``."""
        for entry in self._entries:
            prerelease = entry.version.prerelease
            if prerelease is not None and identifier in prerelease:
                return entry
        return None
