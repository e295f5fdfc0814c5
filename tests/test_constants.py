"""Tests for core constants module.

Tests for naming prefixes, fingerprint parameters and defaults used
throughout the application.
"""

from occfs.core import constants


def test_naming_prefixes() -> None:
    """Transaction ids, snapshots and working areas share the tx_ prefix."""
    assert constants.TRANSACTION_ID_PREFIX == "tx_"
    assert constants.SNAPSHOT_PREFIX == "tx_"
    assert constants.WORKING_DIR_PREFIX == "tx_"


def test_absent_fingerprint_values() -> None:
    """A missing file is recorded as mtime 0 with an empty hash."""
    assert constants.ABSENT_MODIFIED_AT == 0
    assert constants.ABSENT_CONTENT_HASH == ""


def test_hash_chunk_size_positive() -> None:
    assert constants.HASH_CHUNK_SIZE > 0


def test_stress_defaults_consistent() -> None:
    """Test that stress defaults form valid options."""
    assert constants.DEFAULT_STRESS_THREADS >= 1
    assert 0.0 <= constants.DEFAULT_STRESS_WRITE_PROBABILITY <= 1.0
    assert (
        constants.DEFAULT_STRESS_MIN_SLEEP_MS <= constants.DEFAULT_STRESS_MAX_SLEEP_MS
    )


def test_default_dataset_has_no_snapshot_marker() -> None:
    assert "@" not in constants.DEFAULT_DATASET
