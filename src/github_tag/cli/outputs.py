"""GitHub Actions step outputs."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Mapping

    from rich.console import Console

OUTPUT_ENV_VAR = "GITHUB_OUTPUT"


def format_output(name: str, value: str, delimiter: str | None = None) -> str:
    """Format one output in the multi-line ``name<<DELIMITER`` syntax."""
    delimiter = delimiter or f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in value:
        raise ValueError(f"Output delimiter {delimiter!r} occurs in the value of {name}")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def write_outputs(
    outputs: Mapping[str, str],
    console: Console,
    output_file: str | None = None,
) -> None:
    """Append outputs to the ``GITHUB_OUTPUT`` file, or print them as a table."""
    if output_file:
        with Path(output_file).open("a", encoding="utf-8") as f:
            for name, value in outputs.items():
                f.write(format_output(name, value))
        return

    table = Table(title="Outputs", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Value")
    for name, value in outputs.items():
        table.add_row(name, value)
    console.print(table)
