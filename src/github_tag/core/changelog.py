"""Changelog generation.

The default notes engine renders the commits between the previous and the new
tag as markdown in the conventional-commits layout: a heading linking to the
compare view, breaking changes first, then one section per changelog type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Protocol

from github_tag.core.commits import DEFAULT_BREAKING_PATTERN, parse_commits
from github_tag.exceptions import ChangelogError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from github_tag.core.commits import Commit, ParsedCommit
    from github_tag.core.rules import ReleaseRule

DEFAULT_PRESET = "conventionalcommits"


@dataclass(frozen=True)
class NotesContext:
    """Everything the notes engine needs for one release."""

    commits: Sequence[Commit]
    types: Sequence[ReleaseRule]
    previous_tag: str | None
    new_tag: str
    new_version: str
    repository_url: str | None = None
    preset: str = DEFAULT_PRESET
    release_date: date = field(default_factory=lambda: datetime.now(UTC).date())


class NotesGenerator(Protocol):
    """Renders release notes for a :class:`NotesContext`."""

    def generate(self, context: NotesContext) -> str: ...


class MarkdownNotesGenerator:
    """Conventional-commits style markdown notes."""

    def __init__(self, breaking_pattern: str = DEFAULT_BREAKING_PATTERN) -> None:
        self.breaking_pattern = breaking_pattern

    def generate(self, context: NotesContext) -> str:
        """Render the changelog.

        Raises:
            ChangelogError: If the preset is not supported
        """
        if context.preset != DEFAULT_PRESET:
            raise ChangelogError(
                f"Unsupported changelog preset '{context.preset}'",
                hint=f"Only '{DEFAULT_PRESET}' is available",
            )

        parsed = parse_commits(context.commits, self.breaking_pattern)
        lines = [self._heading(context)]

        breaking = [pc for pc in parsed if pc.is_breaking]
        if breaking:
            lines.extend(["", "### ⚠ BREAKING CHANGES", ""])
            for pc in breaking:
                note = pc.breaking_note or pc.description
                lines.append(f"* {_scope(pc)}{note}")

        for rule in context.types:
            if not rule.section:
                continue
            section_commits = [
                pc for pc in parsed if pc.commit_type == rule.type and not pc.is_breaking
            ]
            if not section_commits:
                continue
            lines.extend(["", f"### {rule.section}", ""])
            for pc in section_commits:
                lines.append(self._format_commit(pc, context.repository_url))

        return "\n".join(lines).rstrip() + "\n"

    def _heading(self, context: NotesContext) -> str:
        day = context.release_date.isoformat()
        if context.previous_tag and context.repository_url:
            compare = f"{context.repository_url}/compare/{context.previous_tag}...{context.new_tag}"
            return f"## [{context.new_version}]({compare}) ({day})"
        return f"## {context.new_version} ({day})"

    @staticmethod
    def _format_commit(pc: ParsedCommit, repository_url: str | None) -> str:
        sha = pc.commit.short_sha
        link = f"[{sha}]({repository_url}/commit/{pc.commit.sha})" if repository_url else sha
        return f"* {_scope(pc)}{pc.description} ({link})"


def _scope(pc: ParsedCommit) -> str:
    return f"**{pc.scope}:** " if pc.scope else ""
