"""In-memory snapshot provider over a plain directory.

Stands in for a copy-on-write volume in tests and on machines without ZFS.
Snapshots capture every regular file below ``volume_root`` (bytes and
modification time) in process memory, so they vanish with the process.

Working areas must live outside ``volume_root``: a rollback removes every
file that was not part of the snapshot.
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path

import structlog

from occfs.core.constants import MEMORY_VOLUME_NAME
from occfs.core.errors import StorageError
from occfs.fs.paths import ensure_parent_dir
from occfs.snapshot.base import SnapshotProvider

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _FileImage:
    content: bytes
    mtime_ns: int


class MemorySnapshotProvider(SnapshotProvider):
    """Snapshot provider that keeps directory images in memory."""

    def __init__(self, volume_root: Path, volume: str = MEMORY_VOLUME_NAME) -> None:
        """Initialize in-memory provider.

        Args:
            volume_root: Directory treated as the volume
            volume: Volume name used in snapshot refs
        """
        super().__init__(volume)
        self.volume_root = Path(volume_root).resolve()
        # Insertion order doubles as creation order for rollback -r
        self._snapshots: dict[str, dict[str, _FileImage]] = {}
        self._lock = threading.Lock()

    def snapshots(self) -> list[str]:
        """List snapshot refs, oldest first."""
        with self._lock:
            return list(self._snapshots)

    def create_snapshot(self, transaction_id: str) -> str:
        snapshot_ref = self.snapshot_ref(transaction_id)
        with self._lock:
            if snapshot_ref in self._snapshots:
                raise StorageError(f"Snapshot already exists: {snapshot_ref}")
            try:
                self._snapshots[snapshot_ref] = self._capture()
            except OSError as e:
                raise StorageError(
                    f"Failed to create snapshot {snapshot_ref}: {e}"
                ) from e

        logger.info("snapshot.create", snapshot_ref=snapshot_ref)
        return snapshot_ref

    def snapshot_exists(self, snapshot_ref: str) -> bool:
        with self._lock:
            return snapshot_ref in self._snapshots

    def destroy_snapshot(self, snapshot_ref: str) -> None:
        """Drop a snapshot. Unknown refs are ignored."""
        with self._lock:
            self._snapshots.pop(snapshot_ref, None)

    def _rollback(self, snapshot_ref: str) -> None:
        with self._lock:
            image = self._snapshots.get(snapshot_ref)
            if image is None:
                raise StorageError(f"Snapshot does not exist: {snapshot_ref}")
            try:
                self._restore(image)
            except OSError as e:
                raise StorageError(
                    f"Failed to roll back to snapshot {snapshot_ref}: {e}"
                ) from e

            # Same as `zfs rollback -r`: newer snapshots are destroyed
            refs = list(self._snapshots)
            for newer in refs[refs.index(snapshot_ref) + 1 :]:
                del self._snapshots[newer]

    def _capture(self) -> dict[str, _FileImage]:
        image: dict[str, _FileImage] = {}
        if not self.volume_root.exists():
            return image
        for path in sorted(self.volume_root.rglob("*")):
            if path.is_file() and not path.is_symlink():
                rel = path.relative_to(self.volume_root).as_posix()
                image[rel] = _FileImage(
                    content=path.read_bytes(), mtime_ns=path.stat().st_mtime_ns
                )
        return image

    def _restore(self, image: dict[str, _FileImage]) -> None:
        self.volume_root.mkdir(parents=True, exist_ok=True)

        for path in sorted(self.volume_root.rglob("*"), reverse=True):
            rel = path.relative_to(self.volume_root).as_posix()
            if path.is_file() or path.is_symlink():
                if rel not in image:
                    path.unlink()

        for rel, file_image in image.items():
            path = self.volume_root / rel
            ensure_parent_dir(path)
            path.write_bytes(file_image.content)
            os.utime(path, ns=(file_image.mtime_ns, file_image.mtime_ns))
