"""CLI command for the concurrent stress run."""

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
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from occfs.cli.common import (
    fail,
    manager_from_context,
    resolve_in_volume,
    settings_from_context,
)
from occfs.core.constants import (
    DEFAULT_STRESS_MAX_SLEEP_MS,
    DEFAULT_STRESS_MIN_SLEEP_MS,
    DEFAULT_STRESS_OPERATIONS,
    DEFAULT_STRESS_THREADS,
    DEFAULT_STRESS_TRANSACTIONS,
    DEFAULT_STRESS_WRITE_PROBABILITY,
)
from occfs.core.schemas import StressReport
from occfs.core.stress import StressOptions, run_stress

INITIAL_CONTENT = "Initial content\n"


def _render_report(console: Console, report: StressReport) -> None:
    table = Table(title="Stress run")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Transactions", str(report.total))
    table.add_row("Committed", str(report.committed))
    table.add_row("Conflicts", str(report.conflicts))
    table.add_row("Errors", str(report.errors))
    table.add_row("Avg duration (ms)", f"{report.average_duration_ms:.1f}")
    console.print(table)


def stress(
    ctx: typer.Context,
    transactions: Annotated[
        int, typer.Option("--transactions", "-n", help="Transactions to run.")
    ] = DEFAULT_STRESS_TRANSACTIONS,
    threads: Annotated[
        int, typer.Option("--threads", "-t", help="Concurrent worker threads.")
    ] = DEFAULT_STRESS_THREADS,
    operations: Annotated[
        int, typer.Option("--operations", help="Operations per transaction.")
    ] = DEFAULT_STRESS_OPERATIONS,
    write_probability: Annotated[
        float, typer.Option("--write-probability", help="Chance of a write.")
    ] = DEFAULT_STRESS_WRITE_PROBABILITY,
    min_sleep_ms: Annotated[
        int, typer.Option("--min-sleep-ms", help="Minimum pause after an operation.")
    ] = DEFAULT_STRESS_MIN_SLEEP_MS,
    max_sleep_ms: Annotated[
        int, typer.Option("--max-sleep-ms", help="Maximum pause after an operation.")
    ] = DEFAULT_STRESS_MAX_SLEEP_MS,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Random seed.")
    ] = None,
    file: Annotated[
        Path | None,
        typer.Option(
            "--file",
            help="Shared file (defaults to <volume-root>/validation/file1.txt).",
        ),
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Emit the report as JSON.")
    ] = False,
) -> None:
    """Run many overlapping transactions against one file and report outcomes."""

    try:
        options = StressOptions(
            transactions=transactions,
            threads=threads,
            operations=operations,
            write_probability=write_probability,
            min_sleep_ms=min_sleep_ms,
            max_sleep_ms=max_sleep_ms,
            seed=seed,
        )
    except ValueError as exc:
        raise fail(f"Invalid stress options: {exc}") from exc

    settings = settings_from_context(ctx)
    target = resolve_in_volume(settings, file, "validation/file1.txt")
    if not target.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(INITIAL_CONTENT, encoding="utf-8")

    manager = manager_from_context(ctx)

    # Snapshot failures are counted per transaction as errors
    if json_output:
        report = run_stress(manager, target, options)
        typer.echo(json.dumps(report.model_dump(), indent=2, sort_keys=True))
        return

    console = Console()
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Stress", total=options.transactions)
        report = run_stress(
            manager,
            target,
            options,
            on_progress=lambda _outcome: progress.advance(task),
        )

    _render_report(console, report)
