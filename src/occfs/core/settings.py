"""Runtime configuration for OccFS.

Settings come from ``OCCFS_*`` environment variables, with explicit keyword
overrides taking precedence. Values are validated by pydantic.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from occfs.core.constants import (
    DEFAULT_DATASET,
    DEFAULT_PROVIDER,
    DEFAULT_ZFS_BINARY,
)
from occfs.fs.paths import default_work_root

__all__ = ["ENV_VARS", "Settings", "load_settings"]

#: Environment variable consulted for each settings field
ENV_VARS: dict[str, str] = {
    "dataset": "OCCFS_DATASET",
    "provider": "OCCFS_PROVIDER",
    "volume_root": "OCCFS_VOLUME_ROOT",
    "use_sudo": "OCCFS_USE_SUDO",
    "zfs_binary": "OCCFS_ZFS_BINARY",
    "work_root": "OCCFS_WORK_ROOT",
    "rollback_volume_on_conflict": "OCCFS_ROLLBACK_ON_CONFLICT",
}


class Settings(BaseModel):
    """Validated OccFS configuration.

    Attributes:
        dataset: ZFS dataset holding the live files
        provider: Snapshot provider to use ('zfs' or 'memory')
        volume_root: Directory treated as the volume by the memory provider
        use_sudo: Run zfs commands through sudo
        zfs_binary: Name or path of the zfs executable
        work_root: Directory under which transaction working areas are made
        rollback_volume_on_conflict: Roll the volume back to the transaction's
            snapshot when commit detects a conflict
    """

    dataset: str = DEFAULT_DATASET
    provider: Literal["zfs", "memory"] = DEFAULT_PROVIDER
    volume_root: Path = Field(default_factory=lambda: Path("."))
    use_sudo: bool = True
    zfs_binary: str = DEFAULT_ZFS_BINARY
    work_root: Path = Field(default_factory=default_work_root)
    rollback_volume_on_conflict: bool = True

    model_config = {"frozen": True}

    @field_validator("dataset")
    @classmethod
    def validate_dataset(cls, v: str) -> str:
        if not v or "@" in v:
            raise ValueError("dataset must be a non-empty name without '@'")
        return v


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment.

    Args:
        **overrides: Field values that win over environment variables.
            ``None`` values are ignored so CLI options can pass through.

    Returns:
        Validated settings

    Raises:
        pydantic.ValidationError: If a value is invalid
    """
    values: dict[str, Any] = {}
    for field_name, env_var in ENV_VARS.items():
        env_value = os.getenv(env_var)
        if env_value:
            values[field_name] = env_value

    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
