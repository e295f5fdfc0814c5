"""Tests for the concurrent stress runner."""

from pathlib import Path
from typing import Any

import pytest
from structlog.testing import capture_logs

from occfs.core.manager import TransactionManager
from occfs.core.stress import StressOptions, run_stress, transaction_rng
from occfs.snapshot.memory import MemorySnapshotProvider


@pytest.fixture
def shared_file(volume: Path) -> Path:
    path = volume / "file1.txt"
    path.write_text("Initial content\n")
    return path


def _fast(**kwargs: Any) -> StressOptions:
    return StressOptions(min_sleep_ms=0, max_sleep_ms=0, **kwargs)


class TestStressOptions:
    def test_defaults(self) -> None:
        opts = StressOptions()

        assert opts.transactions == 20
        assert opts.threads == 8
        assert opts.operations == 10
        assert opts.write_probability == 0.9

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"transactions": -1},
            {"threads": 0},
            {"operations": -1},
            {"write_probability": 1.5},
            {"min_sleep_ms": 10, "max_sleep_ms": 5},
        ],
    )
    def test_invalid(self, kwargs: dict[str, int | float]) -> None:
        with pytest.raises(ValueError):
            StressOptions(**kwargs)  # type: ignore[arg-type]


class TestRunStress:
    def test_single_thread_never_conflicts(
        self, manager: TransactionManager, shared_file: Path
    ) -> None:
        report = run_stress(
            manager,
            shared_file,
            _fast(
                transactions=5, threads=1, operations=3, write_probability=1.0, seed=7
            ),
        )

        assert report.total == 5
        assert report.committed == 5
        assert report.conflicts == 0
        assert report.errors == 0
        assert shared_file.read_text().count("RandomText_") == 15

    def test_outcomes_add_up_under_concurrency(
        self, discard_manager: TransactionManager, shared_file: Path
    ) -> None:
        outcomes: list[str] = []

        report = run_stress(
            discard_manager,
            shared_file,
            StressOptions(
                transactions=12, threads=4, operations=3, max_sleep_ms=5, seed=1
            ),
            on_progress=outcomes.append,
        )

        assert report.committed + report.conflicts + report.errors == 12
        assert report.committed >= 1
        assert len(outcomes) == 12
        assert outcomes.count("committed") == report.committed

    def test_zero_transactions(
        self, manager: TransactionManager, shared_file: Path
    ) -> None:
        report = run_stress(manager, shared_file, _fast(transactions=0))

        assert report.total == 0
        assert report.average_duration_ms == 0.0

    def test_summary_logged(
        self, manager: TransactionManager, shared_file: Path
    ) -> None:
        with capture_logs() as logs:
            run_stress(manager, shared_file, _fast(transactions=2, threads=1))

        summary = [e for e in logs if e["event"] == "stress.summary"]
        assert len(summary) == 1
        assert summary[0]["total"] == 2


class TestSeeding:
    """Seeded runs make the same choices per transaction."""

    def test_generator_depends_on_seed_and_index(self) -> None:
        draws = [transaction_rng(42, 3).random() for _ in range(2)]

        assert draws[0] == draws[1]
        assert transaction_rng(42, 4).random() != draws[0]
        assert transaction_rng(43, 3).random() != draws[0]

    def test_seeded_runs_are_reproducible(self, tmp_path: Path) -> None:
        contents = []
        for run in ("first", "second"):
            volume = tmp_path / run
            volume.mkdir()
            path = volume / "file1.txt"
            path.write_text("Initial content\n")
            manager = TransactionManager(
                MemorySnapshotProvider(volume), work_root=tmp_path / f"{run}-work"
            )

            run_stress(
                manager,
                path,
                _fast(transactions=4, threads=1, operations=5, seed=11),
            )
            contents.append(path.read_text())

        assert contents[0] == contents[1]
        assert "RandomText_" in contents[0]
