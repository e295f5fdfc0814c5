"""Tests for the two-transaction conflict demo."""

from pathlib import Path

from occfs.core.demo import run_conflict_demo, run_parallel_conflict_demo
from occfs.core.manager import TransactionManager


def test_second_transaction_conflicts(
    discard_manager: TransactionManager, volume: Path
) -> None:
    path = volume / "test.txt"
    path.write_text("Initial content\n")

    outcome = run_conflict_demo(discard_manager, path)

    assert outcome.first_committed is True
    assert outcome.second_committed is False
    assert outcome.initial_content == "Initial content\n"
    assert outcome.final_content == "A: new line from A.\n"


def test_volume_rollback_restores_initial_content(
    manager: TransactionManager, volume: Path
) -> None:
    path = volume / "test.txt"
    path.write_text("Initial content\n")

    outcome = run_conflict_demo(manager, path, "first\n", "second\n")

    assert (outcome.first_committed, outcome.second_committed) == (True, False)
    assert outcome.final_content == "Initial content\n"


def test_missing_file(discard_manager: TransactionManager, volume: Path) -> None:
    path = volume / "absent.txt"

    outcome = run_conflict_demo(discard_manager, path)

    assert outcome.initial_content is None
    assert outcome.first_committed is True
    assert outcome.second_committed is False
    assert outcome.model_dump(mode="json")["path"] == str(path)


class TestParallelDemo:
    def test_later_thread_conflicts(
        self, discard_manager: TransactionManager, volume: Path
    ) -> None:
        path = volume / "test.txt"
        path.write_text("Initial content\n")

        outcome = run_parallel_conflict_demo(discard_manager, path)

        assert outcome.first_committed is True
        assert outcome.second_committed is False
        assert outcome.final_content == "A: change from thread A.\n"

    def test_volume_rollback_restores_initial_content(
        self, manager: TransactionManager, volume: Path
    ) -> None:
        path = volume / "test.txt"
        path.write_text("Initial content\n")

        outcome = run_parallel_conflict_demo(manager, path, "first\n", "second\n")

        assert (outcome.first_committed, outcome.second_committed) == (True, False)
        assert outcome.final_content == "Initial content\n"

    def test_working_areas_are_cleaned_up(
        self, discard_manager: TransactionManager, volume: Path, work_root: Path
    ) -> None:
        path = volume / "test.txt"
        path.write_text("Initial content\n")

        run_parallel_conflict_demo(discard_manager, path)

        assert list(work_root.iterdir()) == []
