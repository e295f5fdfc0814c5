"""Content fingerprints for conflict detection.

A fingerprint pairs a file's modification timestamp with the SHA-256 digest
of its contents. Transactions capture one per touched file and compare it
against a fresh one at commit time; any difference is a conflict.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

from occfs.core.constants import (
    ABSENT_CONTENT_HASH,
    ABSENT_MODIFIED_AT,
    HASH_CHUNK_SIZE,
)


@dataclass(frozen=True)
class Fingerprint:
    """Point-in-time identity of a live file.

    Attributes:
        modified_at: ``st_mtime_ns`` at capture time (0 if the file was absent)
        content_hash: SHA-256 hex digest of the contents ("" if absent)
    """

    modified_at: int
    content_hash: str

    ABSENT: ClassVar["Fingerprint"]

    @property
    def exists(self) -> bool:
        """Whether the file existed when the fingerprint was taken."""
        return self != Fingerprint.ABSENT


Fingerprint.ABSENT = Fingerprint(
    modified_at=ABSENT_MODIFIED_AT, content_hash=ABSENT_CONTENT_HASH
)


def compute_sha256(path: Path) -> str:
    """Compute the SHA-256 hex digest of a file.

    Args:
        path: File to hash

    Returns:
        Hex-encoded digest
    """
    sha256 = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            sha256.update(chunk)
    return sha256.hexdigest()


def fingerprint(path: Path) -> Fingerprint:
    """Fingerprint a live file.

    A missing file yields ``Fingerprint.ABSENT``. Any other failure to stat
    or read the file (permissions, a directory in its place) propagates as
    ``OSError``.

    Args:
        path: Live file to fingerprint

    Returns:
        Fingerprint of the file as it is right now
    """
    try:
        stat = path.stat()
    except FileNotFoundError:
        return Fingerprint.ABSENT

    try:
        content_hash = compute_sha256(path)
    except FileNotFoundError:
        # Removed between stat and open
        return Fingerprint.ABSENT

    return Fingerprint(modified_at=stat.st_mtime_ns, content_hash=content_hash)
