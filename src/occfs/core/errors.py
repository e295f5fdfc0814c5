"""Custom exceptions for OccFS.

This module defines the typed exceptions raised by the transaction core and
the snapshot providers.
"""

from typing import Any


class OccFSError(Exception):
    """Base exception for all OccFS errors.

    All custom exceptions should inherit from this base class to allow
    for broad exception handling when needed.
    """

    pass


class TransactionError(OccFSError):
    """Raised when a transaction is used in a way it cannot support."""

    pass


class InvalidStateError(TransactionError):
    """Raised when a lifecycle operation hits a transaction that is not active.

    Attributes:
        transaction_id: Identifier of the offending transaction
        state: Lifecycle state the transaction was in
        operation: Name of the rejected operation
    """

    def __init__(self, transaction_id: str, state: str, operation: str) -> None:
        self.transaction_id = transaction_id
        self.state = state
        self.operation = operation

        super().__init__(
            f"Cannot {operation} transaction '{transaction_id}': "
            f"state is {state}, expected active"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for CLI/JSON output."""
        return {
            "error": "invalid_state",
            "transaction_id": self.transaction_id,
            "state": self.state,
            "operation": self.operation,
        }

    def __repr__(self) -> str:
        return (
            f"InvalidStateError(transaction_id={self.transaction_id!r}, "
            f"state={self.state!r}, operation={self.operation!r})"
        )


class StorageError(OccFSError):
    """Raised when the snapshot facility fails to create or restore a snapshot.

    Attributes:
        message: Human-readable description of the failure
        command: Command line that failed (if a command was run)
        returncode: Exit status of the command (if it ran)
        output: Combined output captured from the command
    """

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        returncode: int | None = None,
        output: str | None = None,
    ) -> None:
        """Initialize StorageError.

        Args:
            message: Failure description
            command: Failed command line (optional)
            returncode: Exit code of the failed command (optional)
            output: Captured command output (optional)
        """
        self.message = message
        self.command = command
        self.returncode = returncode
        self.output = output

        full = message
        if returncode is not None:
            full += f" (exit code {returncode})"
        if output:
            full += f": {output.strip()}"

        super().__init__(full)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for CLI/JSON output.

        Returns:
            Dictionary representation suitable for JSON responses
        """
        result: dict[str, Any] = {
            "error": "storage_error",
            "message": self.message,
        }

        if self.command is not None:
            result["command"] = " ".join(self.command)

        if self.returncode is not None:
            result["returncode"] = self.returncode

        if self.output:
            result["output"] = self.output

        return result

    def __repr__(self) -> str:
        return (
            f"StorageError(message={self.message!r}, "
            f"returncode={self.returncode!r})"
        )


class ConflictError(OccFSError):
    """Describes a baseline mismatch found while validating a commit.

    Commit reports conflicts by returning False, so this is not raised by
    ``Transaction.commit``; the instance is kept on ``Transaction.conflict``.

    Attributes:
        path: Live file whose fingerprint drifted
        baseline: Fingerprint captured at first touch
        current: Fingerprint observed during validation
    """

    def __init__(self, path: Any, baseline: Any, current: Any) -> None:
        self.path = path
        self.baseline = baseline
        self.current = current

        super().__init__(f"Conflict detected for file: {path}")

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for CLI/JSON output."""
        return {
            "error": "conflict",
            "path": str(self.path),
            "baseline": {
                "modified_at": self.baseline.modified_at,
                "content_hash": self.baseline.content_hash,
            },
            "current": {
                "modified_at": self.current.modified_at,
                "content_hash": self.current.content_hash,
            },
        }

    def __repr__(self) -> str:
        return f"ConflictError(path={str(self.path)!r})"
