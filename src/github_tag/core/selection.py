"""Baseline ("previous") version selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from github_tag.core.branch import BranchRole
from github_tag.core.tags import HEAD_REF, CatalogEntry, Tag
from github_tag.core.version import CANONICAL_FORMAT, parse_version, to_custom
from github_tag.exceptions import PreviousTagError, PreviousVersionError

if TYPE_CHECKING:
    import semver

    from github_tag.core.tags import TagCatalog

logger = logging.getLogger(__name__)

INITIAL_VERSION = "0.0.0"


@dataclass(frozen=True)
class Baseline:
    """The tag a new version is computed from.

    Attributes:
        tag: Tag as it exists in the repository (or the synthetic initial tag)
        canonical_name: Tag name in ``MAJOR.MINOR.PATCH`` form
        version: Parsed canonical version
        display_name: Tag name rendered in the configured version format
    """

    tag: Tag
    canonical_name: str
    version: semver.Version
    display_name: str

    @property
    def commit_sha(self) -> str:
        return self.tag.commit_sha

    @property
    def is_prerelease(self) -> bool:
        return self.version.prerelease is not None


@dataclass(frozen=True)
class Lineages:
    """Latest release tag and latest pre-release tag of the current identifier."""

    latest: Baseline
    latest_prerelease: Baseline | None


def initial_baseline(tag_prefix: str, version_format: str = CANONICAL_FORMAT) -> Baseline:
    """Synthetic ``<prefix>0.0.0`` tag used when no release tag exists yet."""
    version = parse_version(INITIAL_VERSION)
    if version is None:
        raise PreviousVersionError(f"Could not parse initial version {INITIAL_VERSION}")
    name = f"{tag_prefix}{INITIAL_VERSION}"
    return Baseline(
        tag=Tag(name=name, commit_sha=HEAD_REF),
        canonical_name=name,
        version=version,
        display_name=to_custom(name, version_format, tag_prefix),
    )


def _from_entry(entry: CatalogEntry, tag_prefix: str, version_format: str) -> Baseline:
    return Baseline(
        tag=entry.tag,
        canonical_name=entry.canonical_name,
        version=entry.version,
        display_name=to_custom(entry.canonical_name, version_format, tag_prefix),
    )


class PreviousVersionSelector:
    """Choose the baseline version for the current branch role."""

    def __init__(
        self,
        catalog: TagCatalog,
        tag_prefix: str,
        version_format: str = CANONICAL_FORMAT,
    ) -> None:
        self.catalog = catalog
        self.tag_prefix = tag_prefix
        self.version_format = version_format

    def lineages(self, identifier: str, *, fallback: bool = True) -> Lineages:
        """Find the latest release and pre-release tags.

        Raises:
            PreviousTagError: If there is no release tag and ``fallback`` is off
        """
        latest_entry = self.catalog.latest_release()
        if latest_entry is not None:
            latest = _from_entry(latest_entry, self.tag_prefix, self.version_format)
        elif fallback:
            latest = initial_baseline(self.tag_prefix, self.version_format)
        else:
            raise PreviousTagError("Could not find previous tag.")

        prerelease_entry = self.catalog.latest_prerelease(identifier) if identifier else None
        latest_prerelease = (
            _from_entry(prerelease_entry, self.tag_prefix, self.version_format)
            if prerelease_entry
            else None
        )

        logger.info("Latest tag: %s", latest.display_name)
        logger.info(
            "Latest pre-release tag: %s",
            latest_prerelease.display_name if latest_prerelease else "none",
        )
        return Lineages(latest=latest, latest_prerelease=latest_prerelease)

    def select(self, role: BranchRole, identifier: str, *, fallback: bool = True) -> Baseline:
        """Return the baseline for ``role``.

        Release branches always continue from the latest release. Other
        branches continue from the latest pre-release of their identifier
        unless a release of equal or higher precedence exists.

        Raises:
            PreviousTagError: If no baseline can be determined
        """
        lineages = self.lineages(identifier, fallback=fallback)
        return choose_baseline(lineages, role)


def choose_baseline(lineages: Lineages, role: BranchRole) -> Baseline:
    latest, prerelease = lineages.latest, lineages.latest_prerelease
    if prerelease is None or role is BranchRole.RELEASE:
        baseline = latest
    elif latest.version >= prerelease.version:
        baseline = latest
    else:
        baseline = prerelease

    logger.info(
        "Previous tag was %s, previous version was %s.", baseline.display_name, baseline.version
    )
    return baseline
