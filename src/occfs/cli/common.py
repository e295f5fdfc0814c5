"""Shared helpers for the OccFS command line."""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing only
    import typer
else:  # pragma: no cover - runtime fallback for typing
    typer = importlib.import_module("typer")

from occfs.core.manager import TransactionManager
from occfs.core.settings import Settings, load_settings


def settings_from_context(ctx: Any) -> Settings:
    """Return settings stored by the root callback, or load them."""
    obj = getattr(ctx, "obj", None)
    if isinstance(obj, Settings):
        return obj
    return load_settings()


def manager_from_context(ctx: Any) -> TransactionManager:
    return TransactionManager.from_settings(settings_from_context(ctx))


def resolve_in_volume(settings: Settings, path: Path | None, default: str) -> Path:
    """Resolve a CLI path argument, defaulting to a location in the volume."""
    if path is None:
        return settings.volume_root / default
    return path


def fail(message: str, exc: BaseException | None = None) -> typer.Exit:
    """Print an error and build the exit exception to raise."""
    if exc is not None:
        message = f"{message}: {exc}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    return typer.Exit(code=1)
