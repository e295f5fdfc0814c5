"""CLI entrypoints for OccFS."""

from occfs.cli.ideas import app as ideas_app
from occfs.cli.main import app

__all__ = ["app", "ideas_app"]
