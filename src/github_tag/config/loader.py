"""Configuration loading.

Values are layered, lowest precedence first:

1. model defaults
2. ``[tool.github-tag]`` in the nearest ``pyproject.toml``
3. GitHub Actions inputs (``INPUT_<NAME>``) and ``GITHUB_*`` runtime variables
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from github_tag.config.models import ActionConfig
from github_tag.exceptions import ConfigError, ConfigNotFoundError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

TOOL_SECTION = "github-tag"

# Empty tag_prefix means no prefix; an empty bump disables the default bump
BLANK_MEANINGFUL_INPUTS = frozenset({"tag_prefix", "default_bump", "default_prerelease_bump"})

# GitHubConfig field -> runtime variable
GITHUB_ENV_VARS = {
    "api_url": "GITHUB_API_URL",
    "server_url": "GITHUB_SERVER_URL",
    "repository": "GITHUB_REPOSITORY",
    "ref": "GITHUB_REF",
    "sha": "GITHUB_SHA",
}


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def extract_github_tag_config(pyproject: Mapping[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.github-tag]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_SECTION, {}))


def inputs_from_env(env: Mapping[str, str]) -> dict[str, str]:
    """Collect action inputs from ``INPUT_<NAME>`` variables.

    Blank inputs are skipped so the lower layers apply, except for the fields in
    :data:`BLANK_MEANINGFUL_INPUTS` where an empty value is a setting of its own.
    """
    inputs = {}
    for name in ActionConfig.model_fields:
        if name == "github":
            continue
        key = f"INPUT_{name.upper()}"
        if key not in env:
            continue
        value = env[key].strip()
        if value or name in BLANK_MEANINGFUL_INPUTS:
            inputs[name] = value
    return inputs


def github_context_from_env(env: Mapping[str, str]) -> dict[str, str]:
    """Collect the GitHub runtime context from ``GITHUB_*`` variables."""
    return {field: env[var] for field, var in GITHUB_ENV_VARS.items() if env.get(var)}


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> ActionConfig:
    """Load the configuration for one run.

    Args:
        path: Directory to start the pyproject.toml search from (default: cwd)
        env: Environment mapping (default: ``os.environ``)

    Returns:
        Validated configuration

    Raises:
        ConfigError: If pyproject.toml is not valid TOML
        ConfigValidationError: If a value is invalid
    """
    env = os.environ if env is None else env

    data: dict[str, Any] = {}
    try:
        pyproject_path = find_pyproject_toml(path)
    except ConfigNotFoundError:
        logger.debug("No pyproject.toml found, using action inputs only")
    else:
        data = extract_github_tag_config(load_pyproject_toml(pyproject_path))
        if data:
            logger.debug("Loaded [tool.%s] from %s", TOOL_SECTION, pyproject_path)

    data.update(inputs_from_env(env))
    data["github"] = {**data.get("github", {}), **github_context_from_env(env)}

    try:
        return ActionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration:\n{e}") from e
