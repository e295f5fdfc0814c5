"""Tests for the in-memory snapshot provider."""

from pathlib import Path

import pytest

from occfs.core.errors import StorageError
from occfs.snapshot.memory import MemorySnapshotProvider


class TestCreateSnapshot:
    def test_ref_format(self, provider: MemorySnapshotProvider) -> None:
        """Refs follow <volume>@tx_<transaction id>."""
        assert provider.create_snapshot("tx_1_100") == "memory@tx_tx_1_100"

    def test_custom_volume_name(self, volume: Path) -> None:
        provider = MemorySnapshotProvider(volume, volume="pool/data")

        assert provider.create_snapshot("tx_7_1") == "pool/data@tx_tx_7_1"

    def test_duplicate_id_fails(self, provider: MemorySnapshotProvider) -> None:
        provider.create_snapshot("tx_1_100")

        with pytest.raises(StorageError):
            provider.create_snapshot("tx_1_100")

    def test_exists_after_create(self, provider: MemorySnapshotProvider) -> None:
        ref = provider.create_snapshot("tx_1_100")

        assert provider.snapshot_exists(ref)
        assert not provider.snapshot_exists("memory@tx_unknown")


class TestRollback:
    def test_restores_contents_and_mtime(
        self, provider: MemorySnapshotProvider, volume: Path
    ) -> None:
        f = volume / "test.txt"
        f.write_text("v0")
        mtime = f.stat().st_mtime_ns
        ref = provider.create_snapshot("tx_1_1")

        f.write_text("changed")

        assert provider.rollback_to_snapshot(ref) is True
        assert f.read_text() == "v0"
        assert f.stat().st_mtime_ns == mtime

    def test_removes_files_created_after_snapshot(
        self, provider: MemorySnapshotProvider, volume: Path
    ) -> None:
        ref = provider.create_snapshot("tx_1_1")
        (volume / "sub").mkdir()
        (volume / "sub" / "new.txt").write_text("new")

        provider.rollback_to_snapshot(ref)

        assert not (volume / "sub" / "new.txt").exists()

    def test_recreates_deleted_nested_files(
        self, provider: MemorySnapshotProvider, volume: Path
    ) -> None:
        nested = volume / "a" / "b.txt"
        nested.parent.mkdir()
        nested.write_text("keep")
        ref = provider.create_snapshot("tx_1_1")

        nested.unlink()
        nested.parent.rmdir()
        provider.rollback_to_snapshot(ref)

        assert nested.read_text() == "keep"

    def test_missing_snapshot_is_noop(
        self, provider: MemorySnapshotProvider, volume: Path
    ) -> None:
        """Rolling back to an unknown snapshot leaves the volume alone."""
        f = volume / "test.txt"
        f.write_text("live")

        assert provider.rollback_to_snapshot("memory@tx_gone") is False
        assert f.read_text() == "live"

    def test_destroyed_snapshot_is_noop(self, provider: MemorySnapshotProvider) -> None:
        ref = provider.create_snapshot("tx_1_1")
        provider.destroy_snapshot(ref)

        assert provider.rollback_to_snapshot(ref) is False

    def test_rollback_discards_newer_snapshots(
        self, provider: MemorySnapshotProvider
    ) -> None:
        """Like `zfs rollback -r`, newer snapshots are destroyed."""
        first = provider.create_snapshot("tx_1_1")
        second = provider.create_snapshot("tx_2_1")
        third = provider.create_snapshot("tx_3_1")

        provider.rollback_to_snapshot(second)

        assert provider.snapshots() == [first, second]
        assert not provider.snapshot_exists(third)
