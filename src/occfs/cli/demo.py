"""CLI command for the two-transaction conflict demonstration."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from rich.console import Console

from occfs.cli.common import (
    fail,
    manager_from_context,
    resolve_in_volume,
    settings_from_context,
)
from occfs.core.demo import run_conflict_demo, run_parallel_conflict_demo
from occfs.core.errors import StorageError

INITIAL_CONTENT = "Initial content\n"


def _status(committed: bool) -> str:
    return "[green]committed[/green]" if committed else "[red]rolled back[/red]"


def demo(
    ctx: typer.Context,
    file: Annotated[
        Path | None,
        typer.Option(
            "--file", help="File to edit (defaults to <volume-root>/test.txt)."
        ),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Emit the outcome as JSON.")
    ] = False,
    parallel: Annotated[
        bool,
        typer.Option(
            "--parallel", help="Run each transaction in its own thread."
        ),
    ] = False,
) -> None:
    """Stage one file in two transactions and commit both in turn.

    With ``--parallel`` the transactions run on separate threads and overlap.
    """

    target = resolve_in_volume(settings_from_context(ctx), file, "test.txt")
    if not target.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(INITIAL_CONTENT, encoding="utf-8")

    try:
        run = run_parallel_conflict_demo if parallel else run_conflict_demo
        outcome = run(manager_from_context(ctx), target)
    except StorageError as exc:
        raise fail("Demo failed", exc) from exc

    if json_output:
        payload = outcome.model_dump(mode="json")
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    console = Console()
    console.print(f"File: {outcome.path}")
    console.print(f"Transaction A: {_status(outcome.first_committed)}")
    console.print(f"Transaction B: {_status(outcome.second_committed)}")
    console.print(f"Final content: {outcome.final_content!r}", markup=False)
