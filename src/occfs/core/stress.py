"""Concurrent load generator for the transaction core.

Runs many transactions over a thread pool against one shared file so that
they overlap and conflict, and reports how many committed.
"""

import random
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

import structlog

from occfs.core.constants import (
    DEFAULT_STRESS_MAX_SLEEP_MS,
    DEFAULT_STRESS_MIN_SLEEP_MS,
    DEFAULT_STRESS_OPERATIONS,
    DEFAULT_STRESS_THREADS,
    DEFAULT_STRESS_TRANSACTIONS,
    DEFAULT_STRESS_WRITE_PROBABILITY,
)
from occfs.core.errors import OccFSError
from occfs.core.manager import TransactionManager
from occfs.core.schemas import StressReport
from occfs.core.transaction import Transaction

logger = structlog.get_logger(__name__)

#: Called once per finished transaction with "committed", "conflict" or "error"
ProgressCallback = Callable[[str], None]


@dataclass
class StressOptions:
    """Options for a stress run.

    Attributes:
        transactions: Total number of transactions
        threads: Worker threads running transactions concurrently
        operations: Read/write operations per transaction
        write_probability: Chance that an operation appends to the file
        min_sleep_ms: Lower bound of the pause after each operation
        max_sleep_ms: Upper bound of the pause after each operation
        seed: Seed for the random generator (None for nondeterministic)
    """

    transactions: int = DEFAULT_STRESS_TRANSACTIONS
    threads: int = DEFAULT_STRESS_THREADS
    operations: int = DEFAULT_STRESS_OPERATIONS
    write_probability: float = DEFAULT_STRESS_WRITE_PROBABILITY
    min_sleep_ms: int = DEFAULT_STRESS_MIN_SLEEP_MS
    max_sleep_ms: int = DEFAULT_STRESS_MAX_SLEEP_MS
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.transactions < 0:
            raise ValueError("transactions must be >= 0")
        if self.threads < 1:
            raise ValueError("threads must be >= 1")
        if self.operations < 0:
            raise ValueError("operations must be >= 0")
        if not 0.0 <= self.write_probability <= 1.0:
            raise ValueError("write_probability must be between 0 and 1")
        if self.min_sleep_ms < 0 or self.max_sleep_ms < self.min_sleep_ms:
            raise ValueError("sleep bounds must satisfy 0 <= min <= max")


class _Tally:
    def __init__(self) -> None:
        self.committed = 0
        self.conflicts = 0
        self.errors = 0
        self.duration_ms = 0.0
        self._lock = threading.Lock()

    def record(self, outcome: str, elapsed_ms: float) -> None:
        with self._lock:
            if outcome == "committed":
                self.committed += 1
            elif outcome == "conflict":
                self.conflicts += 1
            else:
                self.errors += 1
            self.duration_ms += elapsed_ms


def transaction_rng(seed: int | None, index: int) -> random.Random:
    """Random generator for the ``index``-th transaction of a run.

    Each transaction draws from its own generator, so a seeded run makes the
    same choices per transaction whatever the thread scheduling.
    """
    if seed is None:
        return random.Random()
    return random.Random(f"{seed}-{index}")


def run_stress(
    manager: TransactionManager,
    path: Path,
    options: StressOptions | None = None,
    on_progress: ProgressCallback | None = None,
) -> StressReport:
    """Run concurrent transactions against a shared file.

    Args:
        manager: Transaction manager shared by all workers
        path: Live file every transaction reads and appends to
        options: Stress parameters
        on_progress: Optional callback invoked after each transaction

    Returns:
        StressReport with commit/conflict/error counts
    """
    opts = options or StressOptions()
    tally = _Tally()

    def worker(index: int) -> None:
        start = time.monotonic()
        outcome = _run_one(manager, path, opts, transaction_rng(opts.seed, index))
        tally.record(outcome, (time.monotonic() - start) * 1000)
        if on_progress is not None:
            on_progress(outcome)

    with ThreadPoolExecutor(max_workers=opts.threads) as executor:
        futures = [executor.submit(worker, i) for i in range(opts.transactions)]
        for future in futures:
            future.result()

    report = StressReport(
        total=opts.transactions,
        committed=tally.committed,
        conflicts=tally.conflicts,
        errors=tally.errors,
        total_duration_ms=tally.duration_ms,
    )
    logger.info("stress.summary", **report.model_dump())
    return report


def _run_one(
    manager: TransactionManager,
    path: Path,
    opts: StressOptions,
    rng: random.Random,
) -> str:
    tx: Transaction | None = None
    try:
        tx = manager.begin()
        for _ in range(opts.operations):
            if rng.random() < opts.write_probability:
                current = tx.read_text(path)
                tx.write(path, current + f"RandomText_{rng.randint(0, 999)}\n")
            else:
                tx.read(path)

            sleep_ms = rng.randint(opts.min_sleep_ms, opts.max_sleep_ms)
            if sleep_ms:
                time.sleep(sleep_ms / 1000)

        return "committed" if tx.commit() else "conflict"
    except (OccFSError, OSError) as e:
        logger.error(
            "stress.transaction_failed",
            transaction_id=tx.transaction_id if tx else None,
            error=str(e),
        )
        if tx is not None and tx.is_active:
            tx.rollback()
        return "error"
