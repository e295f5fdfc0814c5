"""Filesystem helpers for transactional file access.

This module provides content fingerprints used for conflict detection and
the path layout of per-transaction working areas.
"""

from occfs.fs.fingerprint import Fingerprint, compute_sha256, fingerprint
from occfs.fs.paths import (
    ensure_parent_dir,
    normalize_path,
    remove_tree,
    staged_path,
    working_dir_for,
)

__all__ = [
    "Fingerprint",
    "compute_sha256",
    "ensure_parent_dir",
    "fingerprint",
    "normalize_path",
    "remove_tree",
    "staged_path",
    "working_dir_for",
]
