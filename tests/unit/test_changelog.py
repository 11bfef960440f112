"""Tests for markdown release notes."""

from __future__ import annotations

from datetime import date

import pytest

from github_tag.core.changelog import MarkdownNotesGenerator, NotesContext
from github_tag.core.commits import Commit
from github_tag.core.rules import merge_release_rules
from github_tag.exceptions import ChangelogError

REPO_URL = "https://github.com/octo/repo"


def context(commits: list[Commit], **overrides) -> NotesContext:
    values = {
        "commits": commits,
        "types": merge_release_rules().changelog_types(),
        "previous_tag": "v1.2.3",
        "new_tag": "v1.3.0",
        "new_version": "1.3.0",
        "repository_url": REPO_URL,
        "release_date": date(2024, 5, 1),
    }
    values.update(overrides)
    return NotesContext(**values)


class TestMarkdownNotesGenerator:
    """Tests for MarkdownNotesGenerator.generate()."""

    def test_heading_links_compare_view(self, feat_commit: Commit):
        """With a previous tag the heading links the compare view."""
        notes = MarkdownNotesGenerator().generate(context([feat_commit]))

        assert notes.splitlines()[0] == (
            f"## [1.3.0]({REPO_URL}/compare/v1.2.3...v1.3.0) (2024-05-01)"
        )

    def test_plain_heading_without_repository(self, feat_commit: Commit):
        """Without a repository URL the heading and hashes are plain text."""
        notes = MarkdownNotesGenerator().generate(context([feat_commit], repository_url=None))

        assert notes.splitlines()[0] == "## 1.3.0 (2024-05-01)"
        assert "* add user authentication (feat123)" in notes

    def test_sections_in_table_order(self, sample_commits: list[Commit]):
        """Commits are grouped under their type's section."""
        notes = MarkdownNotesGenerator().generate(context(sample_commits))

        assert notes.index("### Features") < notes.index("### Bug Fixes")
        assert notes.index("### Bug Fixes") < notes.index("### Documentation")
        assert (
            f"* **core:** handle empty config ([fix1234]({REPO_URL}/commit/fix1234567890))"
            in notes
        )

    def test_types_without_section_left_out(self, sample_commits: list[Commit]):
        """chore has no section, so chore commits are not listed."""
        notes = MarkdownNotesGenerator().generate(context(sample_commits))

        assert "bump dependencies" not in notes

    def test_breaking_changes_first(self, sample_commits: list[Commit]):
        """Breaking changes get their own section, listed before the others."""
        notes = MarkdownNotesGenerator().generate(context(sample_commits))

        assert notes.index("### ⚠ BREAKING CHANGES") < notes.index("### Features")
        assert "* **api:** v1 endpoints are gone" in notes
        assert "drop v1 endpoints" not in notes

    def test_no_commits(self):
        """Without commits only the heading is rendered."""
        notes = MarkdownNotesGenerator().generate(context([]))

        assert notes.count("\n") == 1
        assert notes.startswith("## [1.3.0]")

    def test_unknown_preset(self, feat_commit: Commit):
        """Only the conventionalcommits preset is supported."""
        with pytest.raises(ChangelogError):
            MarkdownNotesGenerator().generate(context([feat_commit], preset="angular"))
