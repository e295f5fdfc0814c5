"""Core constants for OccFS.

This module defines constants used throughout the package:
- Naming prefixes for transactions, snapshots and working areas
- Hashing parameters for file fingerprints
- Defaults for configuration and the driving applications
"""

# ============================================================================
# Naming
# ============================================================================

#: Prefix of every transaction identifier ("tx_<counter>_<millis>")
TRANSACTION_ID_PREFIX = "tx_"

#: Prefix placed between "<volume>@" and the transaction id in snapshot refs
SNAPSHOT_PREFIX = "tx_"

#: Prefix of per-transaction working directories under the work root
WORKING_DIR_PREFIX = "tx_"

# ============================================================================
# Fingerprints
# ============================================================================

#: Read size used when hashing file contents
HASH_CHUNK_SIZE = 8192

#: Modification time recorded for a file that does not exist
ABSENT_MODIFIED_AT = 0

#: Content hash recorded for a file that does not exist
ABSENT_CONTENT_HASH = ""

# ============================================================================
# Configuration defaults
# ============================================================================

#: Default ZFS dataset backing the live files
DEFAULT_DATASET = "testpool/mydata"

#: Default snapshot provider
DEFAULT_PROVIDER = "zfs"

#: Default name of the ZFS executable
DEFAULT_ZFS_BINARY = "zfs"

#: Volume name used in refs produced by the in-memory provider
MEMORY_VOLUME_NAME = "memory"

# ============================================================================
# Driving applications
# ============================================================================

#: Directory holding idea files for the brainstorming commands
DEFAULT_IDEAS_DIR = "ideas"

#: Stress run defaults (transactions, worker threads, operations each)
DEFAULT_STRESS_TRANSACTIONS = 20
DEFAULT_STRESS_THREADS = 8
DEFAULT_STRESS_OPERATIONS = 10
DEFAULT_STRESS_WRITE_PROBABILITY = 0.9
DEFAULT_STRESS_MIN_SLEEP_MS = 0
DEFAULT_STRESS_MAX_SLEEP_MS = 50
