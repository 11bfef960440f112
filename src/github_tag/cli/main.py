"""github-tag command line entry point."""

from __future__ import annotations

import logging
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from github_tag import __version__

app = typer.Typer(
    name="github-tag",
    help="Compute and push the next semantic version tag from conventional commits.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool = False) -> None:
    """Route log records through rich; ``RUNNER_DEBUG=1`` also enables debug output."""
    debug = verbose or os.environ.get("RUNNER_DEBUG") == "1"
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


@app.command()
def run(
    path: Annotated[
        str | None,
        typer.Option("--path", "-p", help="Directory to search for pyproject.toml from."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute the tag and changelog without creating the tag."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logs.")] = False,
) -> None:
    """Compute the next tag and create it on release branches."""
    from github_tag.cli.commands.tag import run_tag

    configure_logging(verbose)
    run_tag(path, dry_run, console, err_console)


@app.command()
def version() -> None:
    """Show the github-tag version."""
    console.print(f"github-tag [cyan]{__version__}[/]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
