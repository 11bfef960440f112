"""Core business logic for github-tag.

This package contains the version resolution engine:
- Version format conversion and semver increments
- Tag catalog and baseline version selection
- Branch classification
- Release rules and bump resolution
- Conventional commit analysis and changelog rendering
- Release orchestration
"""

from __future__ import annotations

from github_tag.core.branch import BranchClassifier, BranchRole, PatternSet
from github_tag.core.bump import BumpDecision, BumpResolver, BumpSettings, SkipReason
from github_tag.core.changelog import MarkdownNotesGenerator, NotesContext, NotesGenerator
from github_tag.core.commits import Commit, CommitAnalyzer, ConventionalCommitAnalyzer
from github_tag.core.release import TagPlan, create_release_tag, plan_release
from github_tag.core.rules import ReleaseRule, ReleaseRuleTable, merge_release_rules
from github_tag.core.selection import Baseline, PreviousVersionSelector
from github_tag.core.tags import Tag, TagCatalog
from github_tag.core.version import BumpSignal, ReleaseType, increment

__all__ = [
    # Branches
    "BranchClassifier",
    "BranchRole",
    "PatternSet",
    # Bump
    "BumpDecision",
    "BumpResolver",
    "BumpSettings",
    "BumpSignal",
    "SkipReason",
    # Commits
    "Commit",
    "CommitAnalyzer",
    "ConventionalCommitAnalyzer",
    # Changelog
    "MarkdownNotesGenerator",
    "NotesContext",
    "NotesGenerator",
    # Rules
    "ReleaseRule",
    "ReleaseRuleTable",
    "merge_release_rules",
    # Tags
    "Baseline",
    "PreviousVersionSelector",
    "Tag",
    "TagCatalog",
    # Version
    "ReleaseType",
    "increment",
    # Release
    "TagPlan",
    "create_release_tag",
    "plan_release",
]
