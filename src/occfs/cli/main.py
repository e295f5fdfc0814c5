"""Root command of the OccFS command line."""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from pydantic import ValidationError

from occfs.cli.demo import demo
from occfs.cli.ideas import app as ideas_app
from occfs.cli.stress import stress
from occfs.core.settings import load_settings
from occfs.utils.logging import configure_logging

app: TyperType = typer.Typer(
    help="Optimistic file transactions over volume snapshots.",
    no_args_is_help=True,
)


def main(
    ctx: typer.Context,
    provider: Annotated[
        str | None,
        typer.Option("--provider", help="Snapshot provider: zfs or memory."),
    ] = None,
    dataset: Annotated[
        str | None,
        typer.Option("--dataset", help="ZFS dataset holding the live files."),
    ] = None,
    volume_root: Annotated[
        Path | None,
        typer.Option("--volume-root", help="Directory treated as the volume."),
    ] = None,
    work_root: Annotated[
        Path | None,
        typer.Option("--work-root", help="Parent directory of working areas."),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log transaction events.")
    ] = False,
    log_json: Annotated[
        bool, typer.Option("--log-json", help="Render log events as JSON lines.")
    ] = False,
) -> None:
    """Load settings shared by every subcommand."""

    configure_logging(verbose, json_format=log_json)
    try:
        ctx.obj = load_settings(
            provider=provider,
            dataset=dataset,
            volume_root=volume_root,
            work_root=work_root,
        )
    except ValidationError as exc:
        typer.secho(f"Invalid settings: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc


def run_cli(args: Sequence[str] | None = None) -> None:
    app(args=args)


app.callback()(main)
app.add_typer(ideas_app, name="ideas")
app.command("stress")(stress)
app.command("demo")(demo)
