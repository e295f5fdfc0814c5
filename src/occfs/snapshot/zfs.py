"""ZFS snapshot provider.

Thin wrapper around the ``zfs`` command line tool. Every call is a blocking
subprocess; the provider itself holds no state besides its configuration.
"""

import subprocess
from collections.abc import Callable

import structlog

from occfs.core.constants import DEFAULT_ZFS_BINARY
from occfs.core.errors import StorageError
from occfs.snapshot.base import SnapshotProvider

logger = structlog.get_logger(__name__)

Runner = Callable[[list[str]], subprocess.CompletedProcess[str]]


def run_command(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    """Run a command and capture its output.

    Args:
        cmd: Command line to execute

    Returns:
        Completed process with ``stdout`` and ``stderr`` captured as text
    """
    return subprocess.run(cmd, capture_output=True, text=True, check=False)


def _output(result: subprocess.CompletedProcess[str]) -> str:
    return (result.stderr or result.stdout or "").strip()


class ZfsSnapshotProvider(SnapshotProvider):
    """Snapshot provider backed by a ZFS dataset."""

    def __init__(
        self,
        dataset: str,
        *,
        use_sudo: bool = True,
        zfs_binary: str = DEFAULT_ZFS_BINARY,
        runner: Runner | None = None,
    ) -> None:
        """Initialize ZFS provider.

        Args:
            dataset: ZFS dataset, e.g. ``testpool/mydata``
            use_sudo: Prefix every command with ``sudo``
            zfs_binary: Name or path of the zfs executable
            runner: Command runner (defaults to ``run_command``)
        """
        super().__init__(dataset)
        self.use_sudo = use_sudo
        self.zfs_binary = zfs_binary
        self._runner = runner or run_command

    @property
    def dataset(self) -> str:
        return self.volume

    def _command(self, *args: str) -> list[str]:
        cmd = [self.zfs_binary, *args]
        if self.use_sudo:
            cmd.insert(0, "sudo")
        return cmd

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            return self._runner(cmd)
        except OSError as e:
            raise StorageError(
                f"Failed to execute {cmd[0]}: {e}", command=cmd
            ) from e

    def create_snapshot(self, transaction_id: str) -> str:
        snapshot_ref = self.snapshot_ref(transaction_id)
        cmd = self._command("snapshot", snapshot_ref)
        result = self._run(cmd)
        if result.returncode != 0:
            raise StorageError(
                f"Failed to create snapshot {snapshot_ref}",
                command=cmd,
                returncode=result.returncode,
                output=_output(result),
            )

        logger.info("snapshot.create", snapshot_ref=snapshot_ref)
        return snapshot_ref

    def snapshot_exists(self, snapshot_ref: str) -> bool:
        # Only stdout is scanned: the "dataset does not exist" error on
        # stderr quotes the ref too.
        result = self._run(
            self._command("list", "-H", "-o", "name", "-t", "snapshot", snapshot_ref)
        )
        output = result.stdout or ""
        return any(snapshot_ref in line for line in output.splitlines())

    def _rollback(self, snapshot_ref: str) -> None:
        # -r destroys any snapshots more recent than the target
        cmd = self._command("rollback", "-r", snapshot_ref)
        result = self._run(cmd)
        if result.returncode != 0:
            raise StorageError(
                f"Failed to roll back to snapshot {snapshot_ref}",
                command=cmd,
                returncode=result.returncode,
                output=_output(result),
            )
