"""Pydantic schemas for the driving applications.

These schemas define the results reported by the stress runner and the
conflict demo. All schemas use Pydantic v2 for validation and serialization.
"""

from pathlib import Path

from pydantic import BaseModel, Field, computed_field, field_serializer


class StressReport(BaseModel):
    """Aggregate statistics of a stress run.

    Attributes:
        total: Number of transactions started
        committed: Transactions whose commit succeeded
        conflicts: Transactions rejected by commit validation
        errors: Transactions that failed with an exception
        total_duration_ms: Sum of per-transaction wall-clock durations
    """

    total: int = Field(ge=0)
    committed: int = Field(ge=0)
    conflicts: int = Field(ge=0)
    errors: int = Field(ge=0)
    total_duration_ms: float = Field(ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_duration_ms(self) -> float:
        if self.total == 0:
            return 0.0
        return self.total_duration_ms / self.total


class DemoOutcome(BaseModel):
    """Result of the two-transaction conflict demo.

    Attributes:
        path: File both transactions edited
        initial_content: Content before either transaction started
        first_committed: Commit result of the first transaction
        second_committed: Commit result of the second transaction
        final_content: Live content after both commits (None if deleted)
    """

    path: Path
    initial_content: str | None
    first_committed: bool
    second_committed: bool
    final_content: str | None

    @field_serializer("path")
    def serialize_path(self, path: Path) -> str:
        return str(path)
