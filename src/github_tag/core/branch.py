"""Branch classification.

Maps the ref that triggered the run to a :class:`BranchRole`. Branch patterns
come from configuration as comma-separated regular expressions and are matched
against the whole branch name.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)

HEADS_PREFIX = "refs/heads/"
PULL_MARKER = "refs/pull/"

_IDENTIFIER_UNSAFE = re.compile(r"[^a-zA-Z0-9-]")


class BranchRole(StrEnum):
    """What kind of tag, if any, a ref may produce."""

    RELEASE = "release"
    PRE_RELEASE = "pre-release"
    PULL_REQUEST = "pull-request"
    OTHER = "other"

    @property
    def creates_tags(self) -> bool:
        return self in (BranchRole.RELEASE, BranchRole.PRE_RELEASE)


def branch_from_ref(ref: str) -> str:
    """Strip ``refs/heads/`` from a ref."""
    return ref.replace(HEADS_PREFIX, "", 1)


def is_pull_request(ref: str) -> bool:
    return PULL_MARKER in ref


def sanitize_identifier(text: str) -> str:
    """Make ``text`` usable as a semver pre-release identifier."""
    return _IDENTIFIER_UNSAFE.sub("-", text)


@dataclass(frozen=True)
class PatternSet:
    """Branch patterns compiled once per run."""

    patterns: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def compile(cls, csv: str | None) -> PatternSet:
        """Compile comma-separated patterns, skipping blanks and invalid ones."""
        compiled: list[re.Pattern[str]] = []
        for raw in (csv or "").split(","):
            pattern = raw.strip()
            if not pattern:
                continue
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                logger.warning("Ignoring invalid branch pattern %r: %s", pattern, e)
        return cls(tuple(compiled))

    def matches(self, branch: str) -> bool:
        return any(pattern.fullmatch(branch) for pattern in self.patterns)

    def __bool__(self) -> bool:
        return bool(self.patterns)


class BranchClassifier:
    """Classify refs against release and pre-release branch patterns."""

    def __init__(self, release_branches: PatternSet, pre_release_branches: PatternSet) -> None:
        self.release_branches = release_branches
        self.pre_release_branches = pre_release_branches

    @classmethod
    def from_config(
        cls,
        release_branches: str | None,
        pre_release_branches: str | None,
    ) -> BranchClassifier:
        return cls(PatternSet.compile(release_branches), PatternSet.compile(pre_release_branches))

    def classify(self, ref: str) -> BranchRole:
        if is_pull_request(ref):
            return BranchRole.PULL_REQUEST

        branch = branch_from_ref(ref)
        if self.release_branches.matches(branch):
            return BranchRole.RELEASE
        if self.pre_release_branches.matches(branch):
            return BranchRole.PRE_RELEASE
        return BranchRole.OTHER
