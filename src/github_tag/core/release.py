"""Release orchestration.

Runs the resolution steps in their required order: list tags, pick the
baseline, compare commits, resolve the bump, render notes, and finally create
the tag. Tag creation is the only side effect and always comes last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from github_tag.core.branch import (
    BranchClassifier,
    BranchRole,
    branch_from_ref,
    sanitize_identifier,
)
from github_tag.core.bump import BumpResolver, SkipReason
from github_tag.core.changelog import MarkdownNotesGenerator, NotesContext
from github_tag.core.commits import ConventionalCommitAnalyzer
from github_tag.core.rules import merge_release_rules, parse_release_rules
from github_tag.core.selection import PreviousVersionSelector, choose_baseline
from github_tag.core.tags import TagCatalog, compile_prefix
from github_tag.core.version import (
    NormalizeMode,
    ReleaseType,
    normalize_prerelease_identifier,
    to_custom,
)
from github_tag.exceptions import MissingRefError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from github_tag.config.models import ActionConfig
    from github_tag.core.changelog import NotesGenerator
    from github_tag.core.commits import Commit, CommitAnalyzer
    from github_tag.core.tags import Tag

logger = logging.getLogger(__name__)


class RepositoryAPI(Protocol):
    """The remote repository operations a run needs."""

    def list_tags(self, fetch_all: bool = False) -> Sequence[Tag]: ...

    def compare_commits(self, base: str, head: str) -> Sequence[Commit]: ...

    def create_tag(self, name: str, sha: str, *, annotated: bool = False) -> None: ...


@dataclass(frozen=True)
class TagPlan:
    """Everything a run computed, plus whether the tag gets created."""

    role: BranchRole
    commit_sha: str
    release_type: ReleaseType | None = None
    new_tag: str | None = None
    new_version: str | None = None
    previous_tag: str | None = None
    previous_version: str | None = None
    changelog: str = ""
    skip_reason: SkipReason | None = None
    commits: tuple[Commit, ...] = field(default=(), repr=False)

    @property
    def should_create_tag(self) -> bool:
        return self.skip_reason is None and self.new_tag is not None

    def outputs(self) -> dict[str, str]:
        """Action outputs; values that were not computed are left out."""
        values = {
            "new_tag": self.new_tag,
            "new_version": self.new_version,
            "previous_tag": self.previous_tag,
            "previous_version": self.previous_version,
            "release_type": str(self.release_type) if self.release_type else None,
            "changelog": self.changelog if self.new_tag else None,
        }
        return {name: value for name, value in values.items() if value is not None}


def render_version(version: str, config: ActionConfig, identifier: str) -> str:
    """Render a canonical version in the operator's display format."""
    return _normalize(to_custom(version, config.version_format), config, identifier)


def render_tag(canonical_name: str, config: ActionConfig, identifier: str) -> str:
    """Render a canonical tag name; the configured prefix is kept verbatim."""
    rendered = to_custom(canonical_name, config.version_format, config.tag_prefix)
    return _normalize(rendered, config, identifier)


def _normalize(rendered: str, config: ActionConfig, identifier: str) -> str:
    if config.remove_dot_separated_pre_release_identifier:
        rendered = normalize_prerelease_identifier(rendered, identifier, NormalizeMode.REMOVE)
    return rendered


def plan_release(
    config: ActionConfig,
    repository: RepositoryAPI,
    analyzer: CommitAnalyzer | None = None,
    notes: NotesGenerator | None = None,
) -> TagPlan:
    """Compute the next tag without creating it.

    Args:
        config: Run configuration
        repository: Remote repository API
        analyzer: Commit-classification engine (default: conventional commits)
        notes: Notes-generation engine (default: markdown)

    Returns:
        The plan; ``skip_reason`` tells why no tag should be created

    Raises:
        MissingRefError: If the ref or commit to tag is unknown
        VersionResolutionError: If the next version cannot be computed
        GitHubAPIError: If a repository call fails
    """
    analyzer = analyzer or ConventionalCommitAnalyzer()
    notes = notes or MarkdownNotesGenerator()

    ref = config.github.ref
    if not ref:
        raise MissingRefError("Missing GITHUB_REF.")
    commit_sha = config.effective_commit_sha
    if not commit_sha:
        raise MissingRefError("Missing commit_sha or GITHUB_SHA.")

    role = BranchClassifier.from_config(
        config.release_branches, config.pre_release_branches
    ).classify(ref)
    identifier = sanitize_identifier(config.append_to_pre_release_tag or branch_from_ref(ref))
    logger.info("Branch role is %s (pre-release identifier: %s).", role, identifier)

    rule_table = merge_release_rules(parse_release_rules(config.custom_release_rules))

    catalog = TagCatalog.build(
        repository.list_tags(config.fetch_all_tags),
        compile_prefix(config.tag_prefix),
        config.version_format,
        identifier=identifier,
        remove_dot=config.remove_dot_separated_pre_release_identifier,
    )
    selector = PreviousVersionSelector(catalog, config.tag_prefix, config.version_format)
    lineages = selector.lineages(identifier)
    branch_skip = None if role.creates_tags else SkipReason.NOT_A_RELEASE_BRANCH

    previous_tag: str | None = None
    previous_version: str | None = None
    if config.custom_tag:
        commits = tuple(repository.compare_commits(lineages.latest.commit_sha, commit_sha))
        release_type: ReleaseType | None = ReleaseType.CUSTOM
        new_version = config.custom_tag
        skip_reason = branch_skip
    else:
        baseline = choose_baseline(lineages, role)
        previous_tag = render_tag(baseline.canonical_name, config, identifier)
        previous_version = str(baseline.version)

        commits = tuple(repository.compare_commits(baseline.commit_sha, commit_sha))
        signal = analyzer.analyze(rule_table.analysis_rules(), commits)
        decision = BumpResolver(config.bump_settings).resolve(
            baseline.version, signal, role, identifier
        )
        if decision.version is None:
            return TagPlan(
                role=role,
                commit_sha=commit_sha,
                previous_tag=previous_tag,
                previous_version=previous_version,
                skip_reason=decision.skip_reason,
                commits=commits,
            )
        release_type = decision.release_type
        new_version = str(decision.version)
        skip_reason = decision.skip_reason

    new_tag = render_tag(f"{config.tag_prefix}{new_version}", config, identifier)
    new_version = render_version(new_version, config, identifier)
    logger.info("New version is %s, new tag is %s.", new_version, new_tag)
    if config.is_custom_version_format:
        logger.info("With custom version format: %s", config.version_format)

    changelog = notes.generate(
        NotesContext(
            commits=commits,
            types=rule_table.changelog_types(),
            previous_tag=render_tag(lineages.latest.canonical_name, config, identifier),
            new_tag=new_tag,
            new_version=new_version,
            repository_url=config.github.repository_url,
        )
    )

    if skip_reason is None and catalog.contains(new_tag):
        skip_reason = SkipReason.TAG_EXISTS
    if skip_reason is None and config.dry_run:
        skip_reason = SkipReason.DRY_RUN

    return TagPlan(
        role=role,
        commit_sha=commit_sha,
        release_type=release_type,
        new_tag=new_tag,
        new_version=new_version,
        previous_tag=previous_tag,
        previous_version=previous_version,
        changelog=changelog,
        skip_reason=skip_reason,
        commits=commits,
    )


def create_release_tag(plan: TagPlan, repository: RepositoryAPI, *, annotated: bool) -> bool:
    """Create the planned tag unless the plan says to skip.

    Returns:
        Whether a tag was created
    """
    if not plan.should_create_tag or plan.new_tag is None:
        logger.info("Skipping the tag creation: %s.", plan.skip_reason)
        return False

    repository.create_tag(plan.new_tag, plan.commit_sha, annotated=annotated)
    logger.info("Created tag %s at %s.", plan.new_tag, plan.commit_sha)
    return True
