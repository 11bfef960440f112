"""Exception hierarchy for github-tag.

Every error raised on purpose derives from :class:`GitHubTagError` so the CLI
can report it without a traceback. Recoverable problems (foreign tags, bad
rule entries, invalid branch patterns) are logged instead of raised.
"""

from __future__ import annotations


class GitHubTagError(Exception):
    """Base class for all github-tag errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------


class ConfigError(GitHubTagError):
    """Configuration could not be read."""


class ConfigNotFoundError(ConfigError):
    """No pyproject.toml was found."""


class ConfigValidationError(ConfigError):
    """Configuration values failed validation."""


class MissingRefError(ConfigError):
    """The ref or commit to tag is unknown."""


# -----------------------------------------------------------------------------
# Version resolution
# -----------------------------------------------------------------------------


class VersionResolutionError(GitHubTagError):
    """The next version could not be computed."""


class PreviousTagError(VersionResolutionError):
    """No baseline tag could be determined."""


class PreviousVersionError(VersionResolutionError):
    """The baseline tag does not hold a parsable version."""


class IncrementError(VersionResolutionError):
    """Incrementing the baseline version failed."""


# -----------------------------------------------------------------------------
# Collaborators
# -----------------------------------------------------------------------------


class GitHubAPIError(GitHubTagError):
    """A GitHub API call failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code


class ChangelogError(GitHubTagError):
    """Changelog generation failed."""
