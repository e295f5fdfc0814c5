"""Transaction manager.

The manager is an explicit service object: construct one per volume and
share it between the threads that open transactions. The module-level id
counter is the only state shared between transactions, across all managers
in the process.
"""

import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

from occfs.core.constants import TRANSACTION_ID_PREFIX
from occfs.core.settings import Settings
from occfs.core.transaction import Transaction
from occfs.snapshot.base import SnapshotProvider
from occfs.snapshot.memory import MemorySnapshotProvider
from occfs.snapshot.zfs import ZfsSnapshotProvider

logger = structlog.get_logger(__name__)

# Shared by every manager in the process so ids never repeat
_counter = 0
_counter_lock = threading.Lock()


def create_provider(settings: Settings) -> SnapshotProvider:
    """Build the snapshot provider selected by the settings.

    Args:
        settings: OccFS settings

    Returns:
        Configured snapshot provider
    """
    if settings.provider == "memory":
        return MemorySnapshotProvider(settings.volume_root)
    return ZfsSnapshotProvider(
        settings.dataset,
        use_sudo=settings.use_sudo,
        zfs_binary=settings.zfs_binary,
    )


class TransactionManager:
    """Issues transactions bound to fresh volume snapshots."""

    def __init__(
        self,
        provider: SnapshotProvider,
        *,
        work_root: Path | None = None,
        rollback_volume_on_conflict: bool = True,
    ) -> None:
        """Initialize transaction manager.

        Args:
            provider: Snapshot provider for the backing volume
            work_root: Parent directory for working areas (system temp dir
                when omitted)
            rollback_volume_on_conflict: Passed to every transaction
        """
        self.provider = provider
        self.work_root = work_root
        self.rollback_volume_on_conflict = rollback_volume_on_conflict

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransactionManager":
        """Create a manager and provider from settings."""
        return cls(
            create_provider(settings),
            work_root=settings.work_root,
            rollback_volume_on_conflict=settings.rollback_volume_on_conflict,
        )

    def next_transaction_id(self) -> str:
        """Allocate a new transaction id.

        Returns:
            ``tx_<counter>_<epoch millis>``; the counter is process-wide, so
            ids stay unique across managers even when the clock does not move
        """
        global _counter
        with _counter_lock:
            _counter += 1
            count = _counter
        timestamp = int(time.time() * 1000)
        return f"{TRANSACTION_ID_PREFIX}{count}_{timestamp}"

    def begin(self) -> Transaction:
        """Start a transaction.

        Returns:
            New active transaction

        Raises:
            StorageError: If the snapshot could not be created
            OSError: If the working area could not be created
        """
        transaction_id = self.next_transaction_id()
        snapshot_ref = self.provider.create_snapshot(transaction_id)
        logger.info(
            "transaction.begin",
            transaction_id=transaction_id,
            snapshot_ref=snapshot_ref,
        )
        return Transaction(
            transaction_id,
            snapshot_ref,
            self.provider,
            work_root=self.work_root,
            rollback_volume_on_conflict=self.rollback_volume_on_conflict,
        )

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Context manager around ``begin``.

        The block is expected to commit or roll back itself. If it raises
        while the transaction is still active, the transaction is rolled
        back before the exception propagates.

        Usage:
            with manager.transaction() as tx:
                tx.write("notes.txt", "hello")
                committed = tx.commit()
        """
        tx = self.begin()
        try:
            yield tx
        except BaseException:
            if tx.is_active:
                tx.rollback()
            raise
