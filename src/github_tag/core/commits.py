"""Conventional commit parsing and bump analysis.

This is the default commit-classification engine: it reads the conventional
commit header of each message and matches it against the merged release rule
table. Anything implementing :class:`CommitAnalyzer` can take its place.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from github_tag.core.version import BumpSignal, ReleaseType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from github_tag.core.rules import ReleaseRule

logger = logging.getLogger(__name__)

DEFAULT_BREAKING_PATTERN = r"BREAKING[ -]CHANGE:"
DEFAULT_SKIP_RELEASE_PATTERNS = (r"\[skip\s+release\]", r"\[release\s+skip\]")

# type(scope)!: description
COMMIT_PATTERN = re.compile(
    r"^(?P<type>[a-zA-Z][\w-]*)"
    r"(?:\((?P<scope>[^)]*)\))?"
    r"(?P<breaking>!)?"
    r":\s+(?P<description>.+)$"
)
REVERT_PATTERN = re.compile(r'^Revert\s+"(?P<description>.+)"', re.IGNORECASE)

# pre* rule releases count as their base level
_RELEASE_SIGNALS = {
    ReleaseType.MAJOR: BumpSignal.MAJOR,
    ReleaseType.PREMAJOR: BumpSignal.MAJOR,
    ReleaseType.MINOR: BumpSignal.MINOR,
    ReleaseType.PREMINOR: BumpSignal.MINOR,
    ReleaseType.PATCH: BumpSignal.PATCH,
    ReleaseType.PREPATCH: BumpSignal.PATCH,
    ReleaseType.PRERELEASE: BumpSignal.PATCH,
}


@dataclass(frozen=True)
class Commit:
    """A commit as returned by the compare API: only message and hash are kept."""

    sha: str
    message: str

    @property
    def short_sha(self) -> str:
        return self.sha[:7]


@dataclass(frozen=True)
class ParsedCommit:
    """A commit with its conventional commit fields extracted."""

    commit: Commit
    commit_type: str | None
    scope: str | None
    description: str
    is_breaking: bool
    breaking_note: str | None = None

    @property
    def is_conventional(self) -> bool:
        return self.commit_type is not None

    @classmethod
    def from_commit(cls, commit: Commit, breaking_pattern: str) -> ParsedCommit:
        """Parse a commit message.

        Args:
            commit: Commit to parse
            breaking_pattern: Regex that marks a breaking change in the body

        Returns:
            Parsed commit; non-conventional messages keep their first line
            as description and have no type
        """
        header, _, body = commit.message.strip().partition("\n")
        header = header.strip()

        breaking_match = re.search(rf"(?:{breaking_pattern})\s*(?P<note>.*)", body, re.DOTALL)
        breaking_note = breaking_match.group("note").strip() if breaking_match else None

        match = COMMIT_PATTERN.match(header)
        if match:
            return cls(
                commit=commit,
                commit_type=match.group("type"),
                scope=match.group("scope") or None,
                description=match.group("description").strip(),
                is_breaking=bool(match.group("breaking")) or breaking_match is not None,
                breaking_note=breaking_note or None,
            )

        revert = REVERT_PATTERN.match(header)
        if revert:
            return cls(
                commit=commit,
                commit_type="revert",
                scope=None,
                description=revert.group("description"),
                is_breaking=False,
            )

        return cls(
            commit=commit,
            commit_type=None,
            scope=None,
            description=header,
            is_breaking=False,
        )


def filter_skip_release_commits(
    commits: Iterable[Commit],
    skip_patterns: Iterable[str] = DEFAULT_SKIP_RELEASE_PATTERNS,
) -> list[Commit]:
    """Drop commits whose message carries a skip-release marker."""
    markers = [re.compile(pattern, re.IGNORECASE) for pattern in skip_patterns]
    kept = []
    for commit in commits:
        if any(marker.search(commit.message) for marker in markers):
            logger.debug("Skipping commit %s: skip release marker", commit.short_sha)
            continue
        kept.append(commit)
    return kept


def parse_commits(
    commits: Iterable[Commit],
    breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
) -> list[ParsedCommit]:
    return [ParsedCommit.from_commit(commit, breaking_pattern) for commit in commits]


class CommitAnalyzer(Protocol):
    """Turns a commit list into a bump signal."""

    def analyze(self, rules: Sequence[ReleaseRule], commits: Sequence[Commit]) -> BumpSignal: ...


class ConventionalCommitAnalyzer:
    """Bump analysis over conventional commit headers.

    Breaking changes always yield a major bump. Otherwise the commit type is
    looked up in the rule table; the highest bump over all commits wins.
    """

    def __init__(
        self,
        breaking_pattern: str = DEFAULT_BREAKING_PATTERN,
        skip_release_patterns: Sequence[str] = DEFAULT_SKIP_RELEASE_PATTERNS,
    ) -> None:
        self.breaking_pattern = breaking_pattern
        self.skip_release_patterns = tuple(skip_release_patterns)

    def classify(self, parsed: ParsedCommit, rules: Sequence[ReleaseRule]) -> BumpSignal:
        if parsed.is_breaking:
            return BumpSignal.MAJOR

        signal = BumpSignal.NONE
        for rule in rules:
            if rule.release is None or rule.type != parsed.commit_type:
                continue
            rule_signal = _RELEASE_SIGNALS[rule.release]
            if rule_signal.rank > signal.rank:
                signal = rule_signal
        return signal

    def analyze(self, rules: Sequence[ReleaseRule], commits: Sequence[Commit]) -> BumpSignal:
        signal = BumpSignal.NONE
        candidates = filter_skip_release_commits(commits, self.skip_release_patterns)
        for parsed in parse_commits(candidates, self.breaking_pattern):
            commit_signal = self.classify(parsed, rules)
            logger.debug(
                "Commit %s (%s) triggers a %s release",
                parsed.commit.short_sha,
                parsed.commit_type or "non-conventional",
                commit_signal,
            )
            if commit_signal.rank > signal.rank:
                signal = commit_signal

        logger.info("Analysis of %d commits complete: %s release", len(commits), signal)
        return signal
