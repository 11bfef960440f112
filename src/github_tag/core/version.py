"""Semantic version handling.

This module covers everything that turns tag text into comparable versions
and back again:

- ``ReleaseType`` / ``BumpSignal`` vocabularies
- conversion between a custom ``version_format`` (e.g. ``MAJOR.MINOR``) and
  canonical ``MAJOR.MINOR.PATCH`` tag names
- adding or removing the dot between a pre-release identifier and its counter
- incrementing a version by a release type

Parsing, validation and precedence are delegated to ``semver``. Versions are
only ever parsed from canonical-form strings.
"""

from __future__ import annotations

import re
from enum import Enum, StrEnum

import semver

from github_tag.exceptions import IncrementError

CANONICAL_FORMAT = "MAJOR.MINOR.PATCH"
FORMAT_FIELDS = ("MAJOR", "MINOR", "PATCH")

# prefix, major, optional .minor, optional .patch, suffix
_NUMERIC_TAG_PATTERN = re.compile(r"^(.*?)(\d+)(?:\.(\d+))?(?:\.(\d+))?(.*)$", re.DOTALL)


class ReleaseType(StrEnum):
    """Concrete increment applied to a version."""

    MAJOR = "major"
    PREMAJOR = "premajor"
    MINOR = "minor"
    PREMINOR = "preminor"
    PATCH = "patch"
    PREPATCH = "prepatch"
    PRERELEASE = "prerelease"
    CUSTOM = "custom"

    @property
    def is_pre(self) -> bool:
        return self.value.startswith("pre")

    def with_pre(self) -> ReleaseType:
        """Return the ``pre*`` counterpart (``patch`` -> ``prepatch``)."""
        if self.is_pre or self is ReleaseType.CUSTOM:
            return self
        return ReleaseType(f"pre{self.value}")

    def promoted(self) -> ReleaseType:
        """Return the type with a patch level promoted to minor."""
        if self is ReleaseType.PATCH:
            return ReleaseType.MINOR
        if self is ReleaseType.PREPATCH:
            return ReleaseType.PREMINOR
        return self


# Release types a rule may name. ``custom`` only comes from ``custom_tag``.
SUPPORTED_RELEASE_TYPES: tuple[ReleaseType, ...] = (
    ReleaseType.MAJOR,
    ReleaseType.PREMAJOR,
    ReleaseType.MINOR,
    ReleaseType.PREMINOR,
    ReleaseType.PATCH,
    ReleaseType.PREPATCH,
    ReleaseType.PRERELEASE,
)


class BumpSignal(StrEnum):
    """Bump level derived from a set of commits."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _SIGNAL_RANK[self]

    def to_release_type(self) -> ReleaseType | None:
        if self is BumpSignal.NONE:
            return None
        return ReleaseType(self.value)


_SIGNAL_RANK = {
    BumpSignal.NONE: 0,
    BumpSignal.PATCH: 1,
    BumpSignal.MINOR: 2,
    BumpSignal.MAJOR: 3,
}


class NormalizeMode(Enum):
    """Direction for :func:`normalize_prerelease_identifier`."""

    ADD = "add"
    REMOVE = "remove"


def parse_release_type(value: str | ReleaseType | None) -> ReleaseType | None:
    """Parse a configured release type, mapping ``false`` and blanks to ``None``.

    Raises:
        ValueError: If the value is not a known release type
    """
    if value is None or isinstance(value, ReleaseType):
        return value
    text = value.strip().lower()
    if text in ("", "false"):
        return None
    return ReleaseType(text)


# =============================================================================
# Version format conversion
# =============================================================================


def convert_version_format(tag: str, version_format: str) -> str:
    """Render the numeric part of ``tag`` with the fields ``version_format`` names.

    Missing minor/patch fields are read as ``0``. Text before the first number
    and after the last numeric field is kept verbatim, so callers with a known
    tag prefix should strip it first (see :func:`to_canonical`).

    Args:
        tag: Tag name or version, e.g. ``v1.2`` or ``main-v1.2.3-rc.1``
        version_format: Template such as ``MAJOR.MINOR``

    Returns:
        Converted name, or ``""`` when ``tag`` holds no version number

    Raises:
        ValueError: If ``version_format`` names anything but MAJOR, MINOR, PATCH
    """
    items = version_format.split(".")
    unknown = [item for item in items if item not in FORMAT_FIELDS]
    if unknown:
        raise ValueError(
            f"Unknown version_format field(s) {', '.join(map(repr, unknown))} "
            f"in {version_format!r}"
        )

    match = _NUMERIC_TAG_PATTERN.match(tag)
    if not match:
        return ""

    prefix, major, minor, patch, suffix = match.groups()
    fields = {"MAJOR": major, "MINOR": minor or "0", "PATCH": patch or "0"}
    name = ".".join(fields[item] for item in items)
    return f"{prefix}{name}{suffix}"


def is_canonical_format(version_format: str) -> bool:
    return version_format == CANONICAL_FORMAT


def _convert(tag: str, version_format: str, prefix: str) -> str:
    # Digits inside the prefix are never read as MAJOR
    if prefix and tag.startswith(prefix):
        converted = convert_version_format(tag[len(prefix) :], version_format)
        return f"{prefix}{converted}" if converted else ""
    return convert_version_format(tag, version_format)


def to_canonical(tag: str, version_format: str, prefix: str = "") -> str:
    """Translate a tag written in ``version_format`` to ``MAJOR.MINOR.PATCH``.

    ``prefix`` is the configured tag prefix; it is copied through untouched.
    """
    if is_canonical_format(version_format):
        return tag
    return _convert(tag, CANONICAL_FORMAT, prefix)


def to_custom(tag: str, version_format: str, prefix: str = "") -> str:
    """Translate a canonical tag back to ``version_format``."""
    if is_canonical_format(version_format):
        return tag
    return _convert(tag, version_format, prefix)


def parse_version(text: str) -> semver.Version | None:
    """Parse a canonical version string, returning ``None`` if it is not semver."""
    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError):
        return None


def parse_canonical(tag: str, prefix: str) -> semver.Version | None:
    """Parse a canonical tag name, returning ``None`` unless it is ``prefix`` + semver."""
    if not tag.startswith(prefix):
        return None
    return parse_version(tag[len(prefix) :])


# =============================================================================
# Pre-release identifier dots
# =============================================================================


def normalize_prerelease_identifier(tag: str, identifier: str, mode: NormalizeMode) -> str:
    """Add or remove the dot between a pre-release identifier and its counter.

    ``ADD`` turns ``v1.0.0-rc1`` into ``v1.0.0-rc.1`` and leaves dotted tags
    alone. ``REMOVE`` turns ``v1.0.0-rc.1`` into ``v1.0.0-rc1``.
    """
    if not identifier:
        return tag

    escaped = re.escape(identifier)
    if mode is NormalizeMode.ADD:
        if re.search(rf"-{escaped}\.\d", tag):
            return tag
        return re.sub(rf"(-{escaped})(\d+)", r"\1.\2", tag, count=1)

    return re.sub(rf"(-{escaped})\.(\d+)", r"\1\2", tag, count=1)


# =============================================================================
# Increment
# =============================================================================


def _split_prerelease(prerelease: str | None) -> list[str | int]:
    if not prerelease:
        return []
    return [int(part) if part.isdigit() else part for part in prerelease.split(".")]


def _join_prerelease(parts: list[str | int]) -> str | None:
    return ".".join(str(part) for part in parts) or None


def _bump_prerelease(parts: list[str | int], identifier: str) -> list[str | int]:
    if not parts:
        bumped: list[str | int] = [0]
    else:
        bumped = list(parts)
        for index in range(len(bumped) - 1, -1, -1):
            value = bumped[index]
            if isinstance(value, int):
                bumped[index] = value + 1
                break
        else:
            bumped.append(0)

    if identifier:
        # Keep the counter only when it already belongs to this identifier
        same_lineage = str(bumped[0]) == identifier
        if not same_lineage or len(bumped) < 2 or not isinstance(bumped[1], int):
            bumped = [identifier, 0]
    return bumped


def increment(
    version: semver.Version,
    release_type: ReleaseType,
    identifier: str = "",
) -> semver.Version:
    """Increment ``version`` by ``release_type``.

    ``pre*`` types bump the named field and start a ``-<identifier>.0``
    counter. ``prerelease`` bumps the counter of an existing pre-release of the
    same identifier, or behaves like ``prepatch`` on a release version. Plain
    ``major``/``minor``/``patch`` on a pre-release that already sits on that
    boundary just drop the pre-release part (``1.0.0-rc.1`` -> ``1.0.0``).

    Raises:
        IncrementError: For ``custom`` or when the result is not valid semver
    """
    major, minor, patch = version.major, version.minor, version.patch
    parts = _split_prerelease(version.prerelease)

    if release_type is ReleaseType.MAJOR:
        if minor != 0 or patch != 0 or not parts:
            major += 1
        minor, patch, parts = 0, 0, []
    elif release_type is ReleaseType.MINOR:
        if patch != 0 or not parts:
            minor += 1
        patch, parts = 0, []
    elif release_type is ReleaseType.PATCH:
        if not parts:
            patch += 1
        parts = []
    elif release_type is ReleaseType.PREMAJOR:
        major, minor, patch = major + 1, 0, 0
        parts = _bump_prerelease([], identifier)
    elif release_type is ReleaseType.PREMINOR:
        minor, patch = minor + 1, 0
        parts = _bump_prerelease([], identifier)
    elif release_type is ReleaseType.PREPATCH:
        patch += 1
        parts = _bump_prerelease([], identifier)
    elif release_type is ReleaseType.PRERELEASE:
        if not parts:
            patch += 1
        parts = _bump_prerelease(parts, identifier)
    else:
        raise IncrementError(f"Cannot increment {version} with release type '{release_type}'")

    result = f"{major}.{minor}.{patch}"
    prerelease = _join_prerelease(parts)
    if prerelease:
        result = f"{result}-{prerelease}"

    parsed = parse_version(result)
    if parsed is None:
        raise IncrementError(
            f"{result} is not a valid semver",
            hint="Pre-release identifiers may only contain [0-9A-Za-z-]",
        )
    return parsed
