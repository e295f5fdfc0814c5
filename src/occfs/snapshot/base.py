"""Base snapshot provider interface.

A snapshot provider wraps a volume-level point-in-time snapshot facility
(ZFS, or an in-memory stand-in for tests). Transactions take one snapshot
when they begin and roll the whole volume back to it when they abort.
"""

from abc import ABC, abstractmethod

import structlog

from occfs.core.constants import SNAPSHOT_PREFIX

logger = structlog.get_logger(__name__)


class SnapshotProvider(ABC):
    """Base class for volume snapshot providers.

    Subclasses implement the three primitive operations; ``rollback_to_snapshot``
    is shared and treats a missing snapshot as already rolled back.
    """

    def __init__(self, volume: str) -> None:
        """Initialize provider.

        Args:
            volume: Name of the volume/dataset that snapshots cover
        """
        self.volume = volume

    def __repr__(self) -> str:
        return f"{type(self).__name__}(volume={self.volume!r})"

    def snapshot_ref(self, transaction_id: str) -> str:
        """Build the snapshot reference for a transaction.

        Args:
            transaction_id: Transaction identifier

        Returns:
            Reference of the form ``<volume>@tx_<transaction_id>``
        """
        return f"{self.volume}@{SNAPSHOT_PREFIX}{transaction_id}"

    @abstractmethod
    def create_snapshot(self, transaction_id: str) -> str:
        """Create a snapshot tied to a transaction.

        Args:
            transaction_id: Transaction identifier

        Returns:
            Reference of the created snapshot

        Raises:
            StorageError: If the snapshot could not be created
        """
        pass

    @abstractmethod
    def snapshot_exists(self, snapshot_ref: str) -> bool:
        """Check whether a snapshot exists.

        Args:
            snapshot_ref: Snapshot reference

        Returns:
            True if the snapshot is present
        """
        pass

    @abstractmethod
    def _rollback(self, snapshot_ref: str) -> None:
        """Restore the volume to an existing snapshot.

        Raises:
            StorageError: If the rollback failed
        """
        pass

    def rollback_to_snapshot(self, snapshot_ref: str) -> bool:
        """Restore the whole volume to a snapshot.

        Args:
            snapshot_ref: Snapshot reference returned by ``create_snapshot``

        Returns:
            True if a rollback was performed, False if the snapshot no longer
            exists (nothing to do)

        Raises:
            StorageError: If the rollback command failed
        """
        if not self.snapshot_exists(snapshot_ref):
            logger.info("snapshot.missing", snapshot_ref=snapshot_ref)
            return False

        self._rollback(snapshot_ref)
        logger.info("snapshot.rollback", snapshot_ref=snapshot_ref)
        return True
