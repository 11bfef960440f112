"""Implementation of the 'run' command.

Computes the next tag, writes the step outputs, and creates the tag on
release and pre-release branches.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel

from github_tag.cli.outputs import OUTPUT_ENV_VAR, write_outputs
from github_tag.config import load_config
from github_tag.core.bump import SkipReason
from github_tag.core.release import create_release_tag, plan_release
from github_tag.exceptions import GitHubTagError
from github_tag.vcs import GitHubClient

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from rich.console import Console

    from github_tag.core.release import TagPlan

_SKIP_MESSAGES = {
    SkipReason.NOT_A_RELEASE_BRANCH: (
        "This branch is neither a release nor a pre-release branch. Skipping the tag creation."
    ),
    SkipReason.NO_BUMP: "No commit specifies the version bump. Skipping the tag creation.",
    SkipReason.TAG_EXISTS: "This tag already exists. Skipping the tag creation.",
    SkipReason.DRY_RUN: "Dry run: not performing tag action.",
}


def run_tag(
    path: str | None,
    dry_run: bool,
    console: Console,
    err_console: Console,
    env: Mapping[str, str] | None = None,
    client_factory: Callable[[str | None, str, str], GitHubClient] | None = None,
) -> TagPlan:
    """Run the tag command.

    Args:
        path: Optional directory to search for pyproject.toml from
        dry_run: Force a dry run regardless of configuration
        console: Console for standard output
        err_console: Console for error output
        env: Environment mapping (default: ``os.environ``)
        client_factory: Builds the repository client from token, repository
            and API URL (default: :class:`GitHubClient`)

    Returns:
        The computed plan
    """
    env = os.environ if env is None else env
    project_path = Path(path) if path else Path.cwd()

    # Load configuration
    try:
        config = load_config(project_path, env)
    except GitHubTagError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    if dry_run and not config.dry_run:
        config = config.model_copy(update={"dry_run": True})

    repository = config.github.repository
    if not repository:
        err_console.print("[red]Error:[/] Missing GITHUB_REPOSITORY.")
        raise SystemExit(1)

    factory = client_factory or GitHubClient
    try:
        with factory(config.github_token, repository, config.github.api_url) as client:
            plan = plan_release(config, client)
            _print_plan(plan, console)
            write_outputs(plan.outputs(), console, env.get(OUTPUT_ENV_VAR))

            if plan.skip_reason is not None:
                console.print(f"[yellow]{_SKIP_MESSAGES[plan.skip_reason]}[/]")
                return plan

            create_release_tag(plan, client, annotated=config.create_annotated_tag)
    except GitHubTagError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    console.print(
        Panel(
            f"[green]Created tag {plan.new_tag} at {plan.commit_sha[:7]}[/]",
            title="[green]Tag Created[/]",
            border_style="green",
        )
    )
    return plan


def _print_plan(plan: TagPlan, console: Console) -> None:
    if plan.previous_tag:
        console.print(
            f"Previous tag: [cyan]{plan.previous_tag}[/] "
            f"(version [cyan]{plan.previous_version}[/])"
        )
    if plan.new_tag:
        console.print(
            f"New tag: [green]{plan.new_tag}[/] "
            f"(version [green]{plan.new_version}[/], release type [green]{plan.release_type}[/])"
        )
