"""Volume snapshot providers.

Transactions snapshot the backing volume when they begin and roll it back
when they abort. This package provides the provider interface, a ZFS
implementation and an in-memory implementation for tests.
"""

from occfs.snapshot.base import SnapshotProvider
from occfs.snapshot.memory import MemorySnapshotProvider
from occfs.snapshot.zfs import ZfsSnapshotProvider

__all__ = [
    "MemorySnapshotProvider",
    "SnapshotProvider",
    "ZfsSnapshotProvider",
]
