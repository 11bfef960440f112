"""Tests for release rule parsing and merging."""

from __future__ import annotations

import logging

import pytest

from github_tag.core.rules import (
    DEFAULT_CHANGELOG_RULES,
    ReleaseRule,
    merge_release_rules,
    parse_release_rules,
)
from github_tag.core.version import ReleaseType


class TestParseReleaseRules:
    """Tests for parse_release_rules()."""

    def test_empty(self):
        """No custom rules configured."""
        assert parse_release_rules(None) == ()
        assert parse_release_rules("") == ()

    def test_type_and_release(self):
        """A two-field rule for a new type has no section."""
        rules = parse_release_rules("hotfix:patch")

        assert rules == (ReleaseRule("hotfix", ReleaseType.PATCH, None),)

    def test_explicit_section(self):
        """The third field names the changelog section."""
        rules = parse_release_rules("pre-feat:preminor:Upcoming Features")

        assert rules == (ReleaseRule("pre-feat", ReleaseType.PREMINOR, "Upcoming Features"),)

    def test_section_inherited_from_default(self):
        """A known type without a section takes the default section."""
        (rule,) = parse_release_rules("perf:minor")

        assert rule.release is ReleaseType.MINOR
        assert rule.section == "Performance Improvements"

    def test_entries_are_stripped(self):
        """Whitespace around entries and fields is ignored."""
        rules = parse_release_rules(" hotfix : patch , chore:patch ")

        assert [rule.type for rule in rules] == ["hotfix", "chore"]

    def test_single_field_dropped(self, caplog: pytest.LogCaptureFixture):
        """An entry without a release is dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            rules = parse_release_rules("foo,hotfix:patch")

        assert [rule.type for rule in rules] == ["hotfix"]
        assert "foo is not a valid custom release definition." in caplog.text

    def test_unknown_release_dropped(self, caplog: pytest.LogCaptureFixture):
        """An entry with an unknown release type is dropped with a warning."""
        with caplog.at_level(logging.WARNING):
            rules = parse_release_rules("hotfix:huge")

        assert rules == ()
        assert "huge is not a valid release type." in caplog.text

    def test_custom_is_not_a_rule_release(self):
        """custom only comes from custom_tag."""
        assert parse_release_rules("hotfix:custom") == ()


class TestMergeReleaseRules:
    """Tests for merge_release_rules()."""

    def test_defaults_only(self):
        """Without custom rules the defaults are returned unchanged."""
        table = merge_release_rules()

        assert table.rules == tuple(DEFAULT_CHANGELOG_RULES.values())
        assert table.get("feat") == ReleaseRule("feat", ReleaseType.MINOR, "Features")

    def test_override_keeps_section(self):
        """Overriding a default changes the release only."""
        table = merge_release_rules([ReleaseRule("docs", ReleaseType.PATCH)])

        assert table.get("docs") == ReleaseRule("docs", ReleaseType.PATCH, "Documentation")
        assert len(table) == len(DEFAULT_CHANGELOG_RULES)

    def test_override_section(self):
        """A custom section replaces the default one."""
        table = merge_release_rules([ReleaseRule("fix", ReleaseType.PATCH, "Fixes")])

        assert table.get("fix").section == "Fixes"

    def test_new_type_appended(self):
        """New types go after the defaults."""
        table = merge_release_rules([ReleaseRule("hotfix", ReleaseType.PATCH, "Hotfixes")])

        assert table.rules[-1].type == "hotfix"
        assert len(table) == len(DEFAULT_CHANGELOG_RULES) + 1

    def test_match_is_exact(self):
        """Type matching is case sensitive."""
        table = merge_release_rules([ReleaseRule("Feat", ReleaseType.MAJOR)])

        assert table.get("feat").release is ReleaseType.MINOR
        assert table.get("Feat").release is ReleaseType.MAJOR

    def test_changelog_types_need_section(self):
        """Rules without a section stay out of the changelog."""
        table = merge_release_rules([ReleaseRule("hotfix", ReleaseType.PATCH)])

        changelog_types = [rule.type for rule in table.changelog_types()]
        assert "hotfix" not in changelog_types
        assert "docs" in changelog_types
        assert "hotfix" in [rule.type for rule in table.analysis_rules()]
