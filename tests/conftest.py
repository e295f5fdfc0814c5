"""Pytest configuration and fixtures for OccFS tests."""

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from occfs.core.manager import TransactionManager
from occfs.core.settings import ENV_VARS
from occfs.snapshot.memory import MemorySnapshotProvider


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep host OCCFS_* variables and CLI logging setup out of tests."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def volume(tmp_path: Path) -> Path:
    """Directory acting as the snapshotted volume."""
    root = tmp_path / "volume"
    root.mkdir()
    return root


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    """Parent directory for transaction working areas (outside the volume)."""
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def provider(volume: Path) -> MemorySnapshotProvider:
    return MemorySnapshotProvider(volume)


@pytest.fixture
def manager(provider: MemorySnapshotProvider, work_root: Path) -> TransactionManager:
    return TransactionManager(provider, work_root=work_root)


@pytest.fixture
def discard_manager(
    provider: MemorySnapshotProvider, work_root: Path
) -> TransactionManager:
    """Manager whose conflicting commits only discard the working area."""
    return TransactionManager(
        provider, work_root=work_root, rollback_volume_on_conflict=False
    )


@pytest.fixture
def memory_env(
    monkeypatch: pytest.MonkeyPatch, volume: Path, work_root: Path
) -> Path:
    """Point CLI settings at the in-memory provider and the test volume."""
    monkeypatch.setenv("OCCFS_PROVIDER", "memory")
    monkeypatch.setenv("OCCFS_VOLUME_ROOT", str(volume))
    monkeypatch.setenv("OCCFS_WORK_ROOT", str(work_root))
    return volume


def _bump_mtime(path: Path, seconds: int = 5) -> None:
    stat = path.stat()
    new_ns = stat.st_mtime_ns + seconds * 1_000_000_000
    os.utime(path, ns=(stat.st_atime_ns, new_ns))


@pytest.fixture
def bump_mtime() -> Callable[..., None]:
    """Shift a file's modification time without touching its contents."""
    return _bump_mtime
