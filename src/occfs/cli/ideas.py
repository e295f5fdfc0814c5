"""CLI commands for the brainstorming idea store.

Every idea is a text file; adding an idea or a comment runs one transaction
that commits or rolls back as a whole.
"""

from __future__ import annotations

import importlib
import re
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
    from typer import Typer as TyperType
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")
    TyperType = Any

from occfs.cli.common import (
    fail,
    manager_from_context,
    resolve_in_volume,
    settings_from_context,
)
from occfs.core.constants import DEFAULT_IDEAS_DIR
from occfs.core.errors import OccFSError, StorageError
from occfs.core.transaction import Transaction

app: TyperType = typer.Typer(help="Add, list and comment on ideas.")

IdeasDirOption = Annotated[
    Path | None,
    typer.Option(
        "--ideas-dir",
        help="Directory holding idea files (defaults to <volume-root>/ideas).",
    ),
]


def idea_filename(title: str) -> str:
    """Derive the file name of an idea from its title."""
    slug = re.sub(r"\s+", "_", title.strip())
    return f"idea_{slug}.txt"


def idea_body(title: str, content: str) -> str:
    """Render a new idea file with an empty comment section."""
    return f"Title: {title}\n{content}\n\nComments:\n"


def _ideas_dir(ctx: typer.Context, ideas_dir: Path | None) -> Path:
    return resolve_in_volume(settings_from_context(ctx), ideas_dir, DEFAULT_IDEAS_DIR)


def _run_in_transaction(
    ctx: typer.Context, error_message: str, work: Callable[[Transaction], None]
) -> bool:
    """Run ``work`` in one transaction and commit it.

    The transaction is rolled back if ``work`` or the commit fails, and the
    failure is reported as a CLI error.

    Returns:
        Result of ``Transaction.commit``
    """
    manager = manager_from_context(ctx)
    try:
        with manager.transaction() as tx:
            work(tx)
            return tx.commit()
    except StorageError as exc:
        raise fail("Could not start transaction", exc) from exc
    except (OccFSError, OSError, UnicodeError) as exc:
        raise fail(error_message, exc) from exc


def add_idea(
    ctx: typer.Context,
    title: Annotated[str, typer.Option("--title", help="Idea title.")],
    content: Annotated[str, typer.Option("--content", help="Idea text.")],
    ideas_dir: IdeasDirOption = None,
) -> None:
    """Create a new idea file."""

    directory = _ideas_dir(ctx, ideas_dir)
    directory.mkdir(parents=True, exist_ok=True)
    file_name = idea_filename(title)

    committed = _run_in_transaction(
        ctx,
        "Idea could not be saved",
        lambda tx: tx.write(directory / file_name, idea_body(title, content)),
    )
    if committed:
        typer.secho(f"Idea added: {file_name}", fg=typer.colors.GREEN)
        return

    typer.secho(
        "Idea could not be saved; the transaction was rolled back.",
        err=True,
        fg=typer.colors.RED,
    )
    raise typer.Exit(code=1)


def list_ideas(ctx: typer.Context, ideas_dir: IdeasDirOption = None) -> None:
    """List existing idea files."""

    directory = _ideas_dir(ctx, ideas_dir)
    names = (
        sorted(p.name for p in directory.iterdir() if p.is_file())
        if directory.is_dir()
        else []
    )
    if not names:
        typer.echo("No ideas yet.")
        return

    typer.echo("Ideas:")
    for name in names:
        typer.echo(f"- {name}")


def add_comment(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Idea file name, e.g. idea_My_Idea.txt")],
    text: Annotated[str, typer.Option("--text", help="Comment to append.")],
    ideas_dir: IdeasDirOption = None,
) -> None:
    """Append a comment to an existing idea."""

    idea_file = _ideas_dir(ctx, ideas_dir) / name
    if not idea_file.is_file():
        raise fail(f"Idea does not exist: {name}")

    def append(tx: Transaction) -> None:
        current = tx.read_text(idea_file)
        tx.write(idea_file, current + text + "\n")

    if _run_in_transaction(ctx, "Comment could not be saved", append):
        typer.secho("Comment added.", fg=typer.colors.GREEN)
        return

    typer.secho(
        "Comment could not be saved; the transaction was rolled back.",
        err=True,
        fg=typer.colors.RED,
    )
    raise typer.Exit(code=1)


app.command("add")(add_idea)
app.command("list")(list_ideas)
app.command("comment")(add_comment)
