"""Configuration management for github-tag."""

from __future__ import annotations

from github_tag.config.loader import load_config
from github_tag.config.models import ActionConfig, GitHubConfig

__all__ = [
    "ActionConfig",
    "GitHubConfig",
    "load_config",
]
