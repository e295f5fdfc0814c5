"""Optimistic file transactions.

A transaction stages every file it touches into a private working area and
remembers the live file's fingerprint at first touch. Commit re-fingerprints
the live files: if any of them drifted the transaction rolls back, otherwise
the staged copies are copied over the live paths.

Live files are never locked. Two transactions may stage the same file; the
first one to commit wins and the other one fails validation.
"""

import shutil
from enum import Enum
from pathlib import Path

import structlog

from occfs.core.errors import (
    ConflictError,
    InvalidStateError,
    StorageError,
    TransactionError,
)
from occfs.fs.fingerprint import Fingerprint, fingerprint
from occfs.fs.paths import (
    ensure_parent_dir,
    normalize_path,
    remove_tree,
    staged_path,
    working_dir_for,
)
from occfs.snapshot.base import SnapshotProvider
from occfs.utils.debug import debug

logger = structlog.get_logger(__name__)


class TransactionState(str, Enum):
    """Transaction lifecycle states.

    ACTIVE is the only non-terminal state.
    """

    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Transaction:
    """A unit of isolation over live files.

    Transactions are created by ``TransactionManager.begin`` after the
    snapshot has been taken. A transaction is meant to be driven by a
    single thread.
    """

    def __init__(
        self,
        transaction_id: str,
        snapshot_ref: str,
        provider: SnapshotProvider,
        *,
        work_root: Path | None = None,
        rollback_volume_on_conflict: bool = True,
    ) -> None:
        """Initialize transaction and create its working area.

        Args:
            transaction_id: Unique transaction identifier
            snapshot_ref: Snapshot taken for this transaction
            provider: Provider able to roll back to ``snapshot_ref``
            work_root: Parent directory of the working area
            rollback_volume_on_conflict: Roll the volume back when commit
                finds a conflict (otherwise only the working area is dropped)

        Raises:
            OSError: If the working area cannot be created, including
                ``FileExistsError`` when another transaction already owns it
        """
        self._transaction_id = transaction_id
        self._snapshot_ref = snapshot_ref
        self._provider = provider
        self._rollback_volume_on_conflict = rollback_volume_on_conflict
        self._working_dir = working_dir_for(transaction_id, work_root)
        # A working area is owned by exactly one transaction
        self._working_dir.mkdir(parents=True, exist_ok=False)

        # Insertion order is the validation order
        self._baseline: dict[Path, Fingerprint] = {}
        self._staged_names: dict[str, Path] = {}
        self._state = TransactionState.ACTIVE

        self.conflict: ConflictError | None = None
        self.rollback_error: StorageError | None = None

        self._logger = logger.bind(
            transaction_id=transaction_id, snapshot_ref=snapshot_ref
        )
        self._logger.debug("transaction.begin", working_dir=str(self._working_dir))

    def __repr__(self) -> str:
        return (
            f"Transaction(transaction_id={self._transaction_id!r}, "
            f"state={self._state.value!r}, touched={len(self._baseline)})"
        )

    @property
    def transaction_id(self) -> str:
        return self._transaction_id

    @property
    def snapshot_ref(self) -> str:
        return self._snapshot_ref

    @property
    def working_dir(self) -> Path:
        return self._working_dir

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    @property
    def baseline(self) -> dict[Path, Fingerprint]:
        """Copy of the baseline fingerprints, in first-touch order."""
        return dict(self._baseline)

    # -- file access --

    def read(self, path: Path | str) -> bytes:
        """Read a file as seen by this transaction.

        Args:
            path: Live file path

        Returns:
            Contents of the staged copy (empty for a file that does not exist)

        Raises:
            InvalidStateError: If the transaction is not active
            FileNotFoundError: If the file was deleted in this transaction
        """
        self._require_active("read")
        live, staged = self._touch(path)
        try:
            return staged.read_bytes()
        except FileNotFoundError:
            raise FileNotFoundError(
                f"{live} was deleted in transaction {self._transaction_id}"
            ) from None

    def read_text(self, path: Path | str, encoding: str = "utf-8") -> str:
        """Read a file as text. See ``read``."""
        return self.read(path).decode(encoding)

    def write(self, path: Path | str, content: bytes | str) -> None:
        """Replace a file's contents within this transaction.

        Args:
            path: Live file path
            content: New contents; ``str`` is encoded as UTF-8

        Raises:
            InvalidStateError: If the transaction is not active
        """
        self._require_active("write")
        _, staged = self._touch(path)
        if isinstance(content, str):
            content = content.encode("utf-8")
        staged.write_bytes(content)

    def delete(self, path: Path | str) -> None:
        """Mark a file for deletion at commit.

        Args:
            path: Live file path

        Raises:
            InvalidStateError: If the transaction is not active
        """
        self._require_active("delete")
        _, staged = self._touch(path)
        staged.unlink(missing_ok=True)

    # -- lifecycle --

    def commit(self) -> bool:
        """Validate touched files and publish staged changes.

        Returns:
            True if the changes were applied, False if a conflict was found
            (the transaction has then already been rolled back)

        Raises:
            InvalidStateError: If the transaction is not active
            OSError: If a live file cannot be fingerprinted or written. The
                transaction stays active so the caller can roll it back.
        """
        self._require_active("commit")

        for live, initial in self._baseline.items():
            current = fingerprint(live)
            if current != initial:
                self.conflict = ConflictError(live, initial, current)
                self._logger.warning(
                    "transaction.conflict",
                    path=str(live),
                    baseline_hash=initial.content_hash,
                    current_hash=current.content_hash,
                )
                self._abort(rollback_volume=self._rollback_volume_on_conflict)
                return False

        # Not atomic across files: a failure here leaves earlier files applied
        for live in self._baseline:
            staged = staged_path(self._working_dir, live)
            if staged.exists():
                ensure_parent_dir(live)
                shutil.copyfile(staged, live)
                debug(f"Applied {staged} -> {live}")
            else:
                live.unlink(missing_ok=True)
                debug(f"Deleted {live}")

        self._state = TransactionState.COMMITTED
        remove_tree(self._working_dir)
        self._logger.info("transaction.commit", files=len(self._baseline))
        return True

    def rollback(self) -> None:
        """Abort the transaction and restore the volume to its snapshot.

        A snapshot that no longer exists is treated as already rolled back.
        A provider failure is logged and kept on ``rollback_error``; the
        transaction still ends up rolled back.

        Raises:
            InvalidStateError: If the transaction is not active
        """
        self._require_active("rollback")
        self._abort(rollback_volume=True)

    # -- internals --

    def _require_active(self, operation: str) -> None:
        if self._state is not TransactionState.ACTIVE:
            raise InvalidStateError(
                self._transaction_id, self._state.value, operation
            )

    def _touch(self, path: Path | str) -> tuple[Path, Path]:
        """Stage a file and record its baseline on first access."""
        live = normalize_path(path)
        staged = staged_path(self._working_dir, live)
        if live in self._baseline:
            return live, staged

        owner = self._staged_names.get(live.name)
        if owner is not None:
            raise TransactionError(
                f"Cannot stage {live}: {owner} already uses the name "
                f"'{live.name}' in transaction {self._transaction_id}"
            )

        # Fingerprint before copying: a write landing in between then shows
        # up as a conflict instead of being silently overwritten.
        initial = fingerprint(live)
        if initial.exists:
            shutil.copyfile(live, staged)
        else:
            staged.touch()

        self._baseline[live] = initial
        self._staged_names[live.name] = live
        debug(f"Staged {live} -> {staged}")
        return live, staged

    def _abort(self, *, rollback_volume: bool) -> None:
        try:
            if rollback_volume:
                self._provider.rollback_to_snapshot(self._snapshot_ref)
        except StorageError as e:
            self.rollback_error = e
            self._logger.error("transaction.rollback_failed", error=str(e))
        finally:
            self._state = TransactionState.ROLLED_BACK
            remove_tree(self._working_dir)

        self._logger.info("transaction.rollback", volume_restored=rollback_volume)
