"""Turning a commit bump signal into a release type and the next version.

The operator-configured defaults act as ceilings: the chosen release type is
the weaker of the default and the analysed bump, looked up in an explicit
priority table per branch role. A configured default also stands in for a
missing signal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from github_tag.core.branch import BranchRole
from github_tag.core.version import BumpSignal, ReleaseType, increment

if TYPE_CHECKING:
    import semver

logger = logging.getLogger(__name__)

# Weakest first
RELEASE_PRIORITY: tuple[ReleaseType, ...] = (
    ReleaseType.PATCH,
    ReleaseType.MINOR,
    ReleaseType.MAJOR,
)
PRE_RELEASE_PRIORITY: tuple[ReleaseType, ...] = (
    ReleaseType.PRERELEASE,
    ReleaseType.PREPATCH,
    ReleaseType.PREMINOR,
    ReleaseType.PREMAJOR,
)


class SkipReason(StrEnum):
    """Why a run ends without creating a tag."""

    NOT_A_RELEASE_BRANCH = "not-a-release-branch"
    NO_BUMP = "no-bump"
    TAG_EXISTS = "tag-exists"
    DRY_RUN = "dry-run"


@dataclass(frozen=True)
class BumpSettings:
    """Operator bump configuration.

    Attributes:
        default_bump: Bump for release branches when commits name none;
            ``None`` skips tagging in that case
        default_prerelease_bump: Same for pre-release branches
        promote_patch_to_minor: Treat every patch-level bump as minor
    """

    default_bump: ReleaseType | None = ReleaseType.PATCH
    default_prerelease_bump: ReleaseType | None = ReleaseType.PRERELEASE
    promote_patch_to_minor: bool = False


@dataclass(frozen=True)
class BumpDecision:
    """Outcome of :meth:`BumpResolver.resolve`."""

    release_type: ReleaseType | None
    version: semver.Version | None
    skip_reason: SkipReason | None = None

    @property
    def should_tag(self) -> bool:
        return self.skip_reason is None and self.version is not None


def weaker(
    priority: tuple[ReleaseType, ...],
    default: ReleaseType | None,
    bump: ReleaseType,
) -> ReleaseType:
    """Return whichever of ``default`` and ``bump`` ranks lower in ``priority``.

    A default that is unset or not part of ``priority`` sets no ceiling.
    """
    if default is None or default not in priority:
        return bump
    if bump not in priority:
        return default
    return default if priority.index(default) < priority.index(bump) else bump


class BumpResolver:
    """Resolve the release type for one run."""

    def __init__(self, settings: BumpSettings) -> None:
        self.settings = settings

    def release_type(
        self,
        previous: semver.Version,
        signal: BumpSignal,
        role: BranchRole,
    ) -> ReleaseType | None:
        """Pick the release type, or ``None`` when no bump applies.

        Branches that are neither release nor pre-release branches follow the
        release-branch rules so the result can still be reported.
        """
        is_pre_release = role is BranchRole.PRE_RELEASE
        default = (
            self.settings.default_prerelease_bump
            if is_pre_release
            else self.settings.default_bump
        )

        bump = signal.to_release_type()
        if bump is None:
            if default is None:
                logger.debug("No commit specifies the version bump. Skipping the tag creation.")
                return None
            bump = default
        logger.info("Detected bump is %s.", bump)

        if self.settings.promote_patch_to_minor:
            bump = bump.promoted()

        if not is_pre_release:
            return weaker(RELEASE_PRIORITY, default, bump)

        if previous.prerelease and default is ReleaseType.PRERELEASE:
            return ReleaseType.PRERELEASE
        return weaker(PRE_RELEASE_PRIORITY, default, bump.with_pre())

    def resolve(
        self,
        previous: semver.Version,
        signal: BumpSignal,
        role: BranchRole,
        identifier: str,
    ) -> BumpDecision:
        """Compute the release type and the incremented version.

        Raises:
            IncrementError: If the version cannot be incremented
        """
        branch_skip = None if role.creates_tags else SkipReason.NOT_A_RELEASE_BRANCH

        release_type = self.release_type(previous, signal, role)
        if release_type is None:
            return BumpDecision(None, None, branch_skip or SkipReason.NO_BUMP)

        logger.info("Release type is %s.", release_type)
        version = increment(previous, release_type, identifier)
        return BumpDecision(release_type, version, branch_skip)
