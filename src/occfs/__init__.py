"""OccFS - optimistic concurrency control for file mutations.

Transactions stage reads, writes and deletes in private working areas and
publish them at commit time, provided no touched file changed on the live
filesystem in the meantime. Aborted transactions roll the backing volume
back to a snapshot taken when they began.

Usage:
    from occfs import MemorySnapshotProvider, TransactionManager

    manager = TransactionManager(MemorySnapshotProvider(volume_root))
    tx = manager.begin()
    tx.write(volume_root / "notes.txt", "hello")
    committed = tx.commit()
"""

__version__ = "0.1.0"

from occfs.core.errors import (
    ConflictError,
    InvalidStateError,
    OccFSError,
    StorageError,
    TransactionError,
)
from occfs.core.manager import TransactionManager, create_provider
from occfs.core.settings import Settings, load_settings
from occfs.core.transaction import Transaction, TransactionState
from occfs.fs.fingerprint import Fingerprint, fingerprint
from occfs.snapshot import (
    MemorySnapshotProvider,
    SnapshotProvider,
    ZfsSnapshotProvider,
)

__all__ = [
    "ConflictError",
    "Fingerprint",
    "InvalidStateError",
    "MemorySnapshotProvider",
    "OccFSError",
    "Settings",
    "SnapshotProvider",
    "StorageError",
    "Transaction",
    "TransactionError",
    "TransactionManager",
    "TransactionState",
    "ZfsSnapshotProvider",
    "create_provider",
    "fingerprint",
    "load_settings",
]
