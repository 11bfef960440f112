"""Shared fixtures for github-tag tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from github_tag.config.models import ActionConfig, GitHubConfig
from github_tag.core.commits import Commit
from github_tag.core.tags import Tag
from github_tag.vcs.github import GitHubClient


@pytest.fixture
def feat_commit() -> Commit:
    return Commit(sha="feat1234567890", message="feat: add user authentication")


@pytest.fixture
def fix_commit() -> Commit:
    return Commit(sha="fix1234567890", message="fix(core): handle empty config")


@pytest.fixture
def breaking_commit() -> Commit:
    return Commit(
        sha="break1234567890",
        message="feat(api)!: drop v1 endpoints\n\nBREAKING CHANGE: v1 endpoints are gone",
    )


@pytest.fixture
def sample_commits(
    feat_commit: Commit, fix_commit: Commit, breaking_commit: Commit
) -> list[Commit]:
    return [
        feat_commit,
        fix_commit,
        Commit(sha="docs1234567890", message="docs: update readme"),
        Commit(sha="chore1234567890", message="chore: bump dependencies"),
        breaking_commit,
    ]


def make_tags(*names: str) -> list[Tag]:
    """Tags whose commit sha is derived from the name."""
    return [Tag(name=name, commit_sha=f"sha-{name}") for name in names]


def make_config(**overrides: Any) -> ActionConfig:
    """Config for a push to main in octo/repo, with overrides."""
    github = overrides.pop("github", {})
    github_config = GitHubConfig(
        **{
            "repository": "octo/repo",
            "ref": "refs/heads/main",
            "sha": "headsha1234567",
            **github,
        }
    )
    return ActionConfig(github_token="token", github=github_config, **overrides)


@pytest.fixture
def repo() -> MagicMock:
    """Repository API mock with no tags and no commits."""
    client = MagicMock(spec=GitHubClient)
    client.list_tags.return_value = []
    client.compare_commits.return_value = []
    client.__enter__.return_value = client
    return client
