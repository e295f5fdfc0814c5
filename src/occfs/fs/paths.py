"""Path utilities for transaction working areas.

This module provides path normalization for live files and the layout of
per-transaction staging directories.
"""

import os
import shutil
import tempfile
import unicodedata
from pathlib import Path

from occfs.core.constants import WORKING_DIR_PREFIX
from occfs.utils.debug import debug


def normalize_path(path: Path | str, root: Path | None = None) -> Path:
    """Normalize a path for consistent handling.

    Baselines are keyed by the normalized path, so ``a.txt`` and
    ``./a.txt`` refer to the same tracked file.

    Args:
        path: Path to normalize
        root: Optional root directory for relative paths

    Returns:
        Normalized absolute path
    """
    if not isinstance(path, Path):
        path = Path(path)

    if not path.is_absolute() and root is not None:
        path = root / path
    path = path.resolve()

    # Normalize Unicode (NFC on macOS, NFD handling)
    if os.name == "posix":
        path = Path(unicodedata.normalize("NFC", str(path)))

    return path


def default_work_root() -> Path:
    """Return the directory under which working areas are created."""
    return Path(tempfile.gettempdir())


def working_dir_for(transaction_id: str, work_root: Path | None = None) -> Path:
    """Get the working directory owned by a transaction.

    Args:
        transaction_id: Transaction identifier
        work_root: Parent directory (defaults to the system temp dir)

    Returns:
        Deterministic path ``<work_root>/tx_<transaction_id>``
    """
    if work_root is None:
        work_root = default_work_root()
    return work_root / f"{WORKING_DIR_PREFIX}{transaction_id}"


def staged_path(working_dir: Path, live_path: Path) -> Path:
    """Get the staged copy location for a live file.

    Staged copies are named by the live file's base name.

    Args:
        working_dir: Transaction working directory
        live_path: Live file path

    Returns:
        Path of the staged copy inside the working directory
    """
    return working_dir / live_path.name


def ensure_parent_dir(path: Path) -> None:
    """Ensure parent directory exists for a path.

    Args:
        path: Path whose parent directory should exist

    Raises:
        OSError: If parent directory cannot be created
    """
    parent = path.parent
    if not parent.exists():
        parent.mkdir(parents=True, exist_ok=True)
        debug(f"Created parent directory: {parent}")


def remove_tree(path: Path) -> None:
    """Recursively delete a directory if it exists.

    Args:
        path: Directory to remove
    """
    if path.exists():
        shutil.rmtree(path)
        debug(f"Removed working directory: {path}")
