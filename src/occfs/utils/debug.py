"""Debug utility for OccFS.

Provides a single debug() function that can be toggled via the
OCCFS_DEBUG environment variable. Filesystem helpers use it for
low-level tracing that is too noisy for the structured log.

Usage:
    from occfs.utils.debug import debug

    debug(f"Staged {path} into {working_dir}")

Environment:
    OCCFS_DEBUG: Set to '1', 'true', 'yes' (case-insensitive) to enable
                 debug output. Any other value or unset disables it.

Example:
    $ OCCFS_DEBUG=1 occfs ideas list    # Debug enabled
    $ occfs ideas list                  # Debug disabled (default)
"""

import os
import sys
from typing import Any

# Determine if debug mode is enabled at module import time
_DEBUG_ENABLED = os.environ.get("OCCFS_DEBUG", "").lower() in (
    "1",
    "true",
    "yes",
)


def debug(msg: Any) -> None:
    """Print debug message if OCCFS_DEBUG is enabled.

    Args:
        msg: Message to print. Will be converted to string.

    Note:
        The environment variable is read at module import time. Changing it
        after import has no effect unless the module is reloaded.
    """
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stderr)
