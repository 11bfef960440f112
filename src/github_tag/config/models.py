"""Configuration models.

One immutable :class:`ActionConfig` is built per run and passed explicitly to
every component; nothing reads the environment after loading.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from github_tag.core.bump import BumpSettings
from github_tag.core.version import (
    CANONICAL_FORMAT,
    FORMAT_FIELDS,
    ReleaseType,
    is_canonical_format,
    parse_release_type,
)


class GitHubConfig(BaseModel):
    """Repository and runtime context, normally taken from ``GITHUB_*`` variables."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_url: str = Field(
        default="https://api.github.com",
        description="REST API root (GitHub Enterprise: https://host/api/v3)",
    )
    server_url: str = Field(default="https://github.com", description="Web UI root")
    repository: str | None = Field(default=None, description="owner/name")
    ref: str | None = Field(default=None, description="Ref that triggered the run")
    sha: str | None = Field(default=None, description="Commit that triggered the run")

    @property
    def repository_url(self) -> str | None:
        if not self.repository:
            return None
        return f"{self.server_url.rstrip('/')}/{self.repository}"


class ActionConfig(BaseModel):
    """Inputs of a tagging run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    github_token: str | None = Field(default=None, repr=False)
    default_bump: ReleaseType | None = Field(
        default=ReleaseType.PATCH,
        description="Bump for release branches when no commit names one; None disables",
    )
    default_prerelease_bump: ReleaseType | None = Field(
        default=ReleaseType.PRERELEASE,
        description="Bump for pre-release branches when no commit names one; None disables",
    )
    tag_prefix: str = "v"
    append_to_pre_release_tag: str | None = Field(
        default=None,
        description="Pre-release identifier; defaults to the branch name",
    )
    remove_dot_separated_pre_release_identifier: bool = False
    custom_tag: str | None = None
    custom_release_rules: str | None = Field(
        default=None,
        description="Comma-separated type:release[:section] entries",
    )
    release_branches: str = "master,main"
    pre_release_branches: str | None = None
    commit_sha: str | None = None
    create_annotated_tag: bool = False
    fetch_all_tags: bool = False
    dry_run: bool = False
    promote_patch_to_minor: bool = False
    version_format: str = CANONICAL_FORMAT
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @field_validator("default_bump", "default_prerelease_bump", mode="before")
    @classmethod
    def _parse_bump(cls, value: object) -> ReleaseType | None:
        if value is False:
            return None
        if value is not None and not isinstance(value, str):
            raise ValueError(f"expected a release type or 'false', got {value!r}")
        release_type = parse_release_type(value)
        if release_type is ReleaseType.CUSTOM:
            raise ValueError("'custom' cannot be used as a default bump")
        return release_type

    @field_validator(
        "github_token",
        "append_to_pre_release_tag",
        "custom_tag",
        "custom_release_rules",
        "pre_release_branches",
        "commit_sha",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("version_format")
    @classmethod
    def _check_version_format(cls, value: str) -> str:
        items = value.split(".")
        unknown = [item for item in items if item not in FORMAT_FIELDS]
        if unknown or len(set(items)) != len(items):
            raise ValueError(
                f"version_format must be built from {', '.join(FORMAT_FIELDS)} "
                f"separated by '.', got {value!r}"
            )
        return value

    @property
    def effective_commit_sha(self) -> str | None:
        """``commit_sha`` if set, otherwise the commit that triggered the run."""
        return self.commit_sha or self.github.sha

    @property
    def is_custom_version_format(self) -> bool:
        return not is_canonical_format(self.version_format)

    @property
    def bump_settings(self) -> BumpSettings:
        return BumpSettings(
            default_bump=self.default_bump,
            default_prerelease_bump=self.default_prerelease_bump,
            promote_patch_to_minor=self.promote_patch_to_minor,
        )
