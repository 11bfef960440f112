"""Tests for bump resolution."""

from __future__ import annotations

import pytest

from github_tag.core.branch import BranchRole
from github_tag.core.bump import (
    PRE_RELEASE_PRIORITY,
    RELEASE_PRIORITY,
    BumpResolver,
    BumpSettings,
    SkipReason,
    weaker,
)
from github_tag.core.version import BumpSignal, ReleaseType, parse_version


def v(text: str):
    version = parse_version(text)
    assert version is not None
    return version


def resolver(**settings) -> BumpResolver:
    return BumpResolver(BumpSettings(**settings))


class TestWeaker:
    """The default acts as a ceiling, never amplifying the bump."""

    def test_default_caps_bump(self):
        """default patch + analysed major gives patch."""
        assert weaker(RELEASE_PRIORITY, ReleaseType.PATCH, ReleaseType.MAJOR) is ReleaseType.PATCH

    def test_bump_below_default_kept(self):
        """default major + analysed minor gives minor."""
        assert weaker(RELEASE_PRIORITY, ReleaseType.MAJOR, ReleaseType.MINOR) is ReleaseType.MINOR

    def test_unset_default_sets_no_ceiling(self):
        """Without a default the bump is used as is."""
        assert weaker(RELEASE_PRIORITY, None, ReleaseType.MAJOR) is ReleaseType.MAJOR

    def test_pre_release_table(self):
        """Pre-release types rank prerelease < prepatch < preminor < premajor."""
        assert (
            weaker(PRE_RELEASE_PRIORITY, ReleaseType.PREMINOR, ReleaseType.PREMAJOR)
            is ReleaseType.PREMINOR
        )


class TestReleaseBranch:
    """Resolution on release branches."""

    def test_default_never_escalated(self):
        """default_bump=patch with a major signal releases a patch."""
        decision = resolver(default_bump=ReleaseType.PATCH).resolve(
            v("1.2.3"), BumpSignal.MAJOR, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is ReleaseType.PATCH
        assert str(decision.version) == "1.2.4"
        assert decision.should_tag

    def test_signal_below_default(self):
        """A signal weaker than the default is used."""
        decision = resolver(default_bump=ReleaseType.MAJOR).resolve(
            v("1.2.3"), BumpSignal.MINOR, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is ReleaseType.MINOR
        assert str(decision.version) == "1.3.0"

    def test_default_substitutes_missing_signal(self):
        """No signal falls back to default_bump."""
        decision = resolver(default_bump=ReleaseType.MINOR).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is ReleaseType.MINOR
        assert str(decision.version) == "1.3.0"

    def test_disabled_default_skips(self):
        """No signal and default_bump=false skips tagging."""
        decision = resolver(default_bump=None).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is None
        assert decision.version is None
        assert decision.skip_reason is SkipReason.NO_BUMP
        assert not decision.should_tag

    def test_disabled_default_uses_signal(self):
        """With default_bump=false the analysed bump is used uncapped."""
        decision = resolver(default_bump=None).resolve(
            v("1.2.3"), BumpSignal.MAJOR, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is ReleaseType.MAJOR
        assert str(decision.version) == "2.0.0"

    def test_promote_patch_to_minor(self):
        """promote_patch_to_minor turns a patch into a minor."""
        decision = resolver(default_bump=ReleaseType.MINOR, promote_patch_to_minor=True).resolve(
            v("1.2.3"), BumpSignal.PATCH, BranchRole.RELEASE, "main"
        )
        assert decision.release_type is ReleaseType.MINOR
        assert str(decision.version) == "1.3.0"

    def test_promotion_still_capped_by_default(self):
        """A promoted bump never exceeds default_bump."""
        release_type = resolver(
            default_bump=ReleaseType.PATCH, promote_patch_to_minor=True
        ).release_type(v("1.2.3"), BumpSignal.NONE, BranchRole.RELEASE)
        assert release_type is ReleaseType.PATCH

    def test_promotion_without_default(self):
        """Without a ceiling a promoted patch releases a minor."""
        release_type = resolver(default_bump=None, promote_patch_to_minor=True).release_type(
            v("1.2.3"), BumpSignal.PATCH, BranchRole.RELEASE
        )
        assert release_type is ReleaseType.MINOR


class TestPreReleaseBranch:
    """Resolution on pre-release branches."""

    def test_preminor_default_from_release(self):
        """1.2.3 + preminor default and no signal gives 1.3.0-rc.0."""
        decision = resolver(default_prerelease_bump=ReleaseType.PREMINOR).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.PRE_RELEASE, "rc"
        )
        assert decision.release_type is ReleaseType.PREMINOR
        assert str(decision.version) == "1.3.0-rc.0"

    def test_prerelease_counter_increment(self):
        """1.2.3-rc.1 + prerelease default gives 1.2.3-rc.2."""
        decision = resolver(default_prerelease_bump=ReleaseType.PRERELEASE).resolve(
            v("1.2.3-rc.1"), BumpSignal.MINOR, BranchRole.PRE_RELEASE, "rc"
        )
        assert decision.release_type is ReleaseType.PRERELEASE
        assert str(decision.version) == "1.2.3-rc.2"

    def test_signal_prefixed_with_pre(self):
        """An analysed bump becomes its pre* counterpart."""
        decision = resolver(default_prerelease_bump=ReleaseType.PREMAJOR).resolve(
            v("1.2.3"), BumpSignal.MINOR, BranchRole.PRE_RELEASE, "beta"
        )
        assert decision.release_type is ReleaseType.PREMINOR
        assert str(decision.version) == "1.3.0-beta.0"

    def test_prerelease_default_on_release_version(self):
        """prerelease on a release version starts a new patch pre-release."""
        decision = resolver(default_prerelease_bump=ReleaseType.PRERELEASE).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.PRE_RELEASE, "rc"
        )
        assert decision.release_type is ReleaseType.PRERELEASE
        assert str(decision.version) == "1.2.4-rc.0"

    def test_disabled_default_skips(self):
        """No signal and default_prerelease_bump=false skips tagging."""
        decision = resolver(default_prerelease_bump=None).resolve(
            v("1.2.3-rc.1"), BumpSignal.NONE, BranchRole.PRE_RELEASE, "rc"
        )
        assert decision.skip_reason is SkipReason.NO_BUMP

    def test_release_default_not_used(self):
        """default_bump does not apply on pre-release branches."""
        settings = {"default_bump": None, "default_prerelease_bump": ReleaseType.PREPATCH}
        decision = resolver(**settings).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.PRE_RELEASE, "rc"
        )
        assert decision.release_type is ReleaseType.PREPATCH
        assert str(decision.version) == "1.2.4-rc.0"


class TestOtherBranches:
    """Branches that never produce tags."""

    @pytest.mark.parametrize("role", [BranchRole.OTHER, BranchRole.PULL_REQUEST])
    def test_preview_without_tag(self, role: BranchRole):
        """The version is computed but flagged as not taggable."""
        decision = resolver().resolve(v("1.2.3"), BumpSignal.MINOR, role, "feature-x")
        assert decision.skip_reason is SkipReason.NOT_A_RELEASE_BRANCH
        assert decision.release_type is ReleaseType.PATCH
        assert not decision.should_tag

    def test_no_bump_reports_branch(self):
        """Without any bump the branch reason still wins."""
        decision = resolver(default_bump=None).resolve(
            v("1.2.3"), BumpSignal.NONE, BranchRole.OTHER, "feature-x"
        )
        assert decision.skip_reason is SkipReason.NOT_A_RELEASE_BRANCH
        assert decision.version is None
