"""Two-transaction conflict demonstration.

Both transactions stage the same file before either commits. The first
commit wins; the second finds the file changed since its first read and
rolls back. The parallel variant runs the same scenario with each
transaction on its own thread.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from occfs.core.manager import TransactionManager
from occfs.core.schemas import DemoOutcome
from occfs.core.transaction import Transaction
from occfs.fs.paths import normalize_path

logger = structlog.get_logger(__name__)


def _read_live(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def run_conflict_demo(
    manager: TransactionManager,
    path: Path,
    first_content: str = "A: new line from A.\n",
    second_content: str = "B: new line from B.\n",
) -> DemoOutcome:
    """Run the sequential conflict scenario.

    Args:
        manager: Transaction manager
        path: File both transactions edit
        first_content: Content written by the first transaction
        second_content: Content written by the second transaction

    Returns:
        DemoOutcome with both commit results and the final live content
    """
    path = normalize_path(path)
    initial = _read_live(path)

    tx_a = manager.begin()
    tx_a.read(path)
    tx_a.write(path, first_content)

    tx_b = manager.begin()
    tx_b.read(path)
    tx_b.write(path, second_content)

    first_committed = tx_a.commit()
    second_committed = tx_b.commit()

    return DemoOutcome(
        path=path,
        initial_content=initial,
        first_committed=first_committed,
        second_committed=second_committed,
        final_content=_read_live(path),
    )


def run_parallel_conflict_demo(
    manager: TransactionManager,
    path: Path,
    first_content: str = "A: change from thread A.\n",
    second_content: str = "B: change from thread B.\n",
    timeout: float = 30.0,
) -> DemoOutcome:
    """Run the conflict scenario with each transaction in its own thread.

    Both threads stage the file before either commits. Thread A commits
    first; thread B commits once A has finished, so its baseline is stale.

    Args:
        manager: Transaction manager shared by both threads
        path: File both transactions edit
        first_content: Content written by thread A
        second_content: Content written by thread B
        timeout: Seconds to wait for the other thread at each handoff

    Returns:
        DemoOutcome with both commit results and the final live content
    """
    path = normalize_path(path)
    initial = _read_live(path)

    staged = threading.Barrier(2, timeout=timeout)
    first_done = threading.Event()
    results: dict[str, bool] = {}

    def stage(content: str) -> Transaction:
        try:
            tx = manager.begin()
            tx.read(path)
            tx.write(path, content)
        except BaseException:
            # Release the other thread instead of leaving it at the barrier
            staged.abort()
            raise
        staged.wait()
        return tx

    def thread_a() -> None:
        try:
            results["first"] = stage(first_content).commit()
        finally:
            first_done.set()

    def thread_b() -> None:
        tx = stage(second_content)
        first_done.wait(timeout)
        results["second"] = tx.commit()

    with ThreadPoolExecutor(max_workers=2) as executor:
        futures = [executor.submit(thread_a), executor.submit(thread_b)]
        for future in futures:
            future.result()

    logger.info("demo.parallel", **results)
    return DemoOutcome(
        path=path,
        initial_content=initial,
        first_committed=results["first"],
        second_committed=results["second"],
        final_content=_read_live(path),
    )
