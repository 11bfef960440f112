"""Remote repository access."""

from __future__ import annotations

from github_tag.vcs.github import GitHubClient

__all__ = ["GitHubClient"]
