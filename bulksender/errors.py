"""Exception types raised by loading, dispatch and verification."""

from typing import Any


class BulkSenderError(Exception):
    """Base class for every fatal error raised by bulksender."""


# Input errors


class LedgerError(BulkSenderError, ValueError):
    """A transfer list or balance snapshot row could not be loaded."""

    def __init__(self, row: int, msg: str) -> None:
        self.row = row
        super().__init__(msg)


class IncompleteRow(LedgerError):
    """Row is missing its address or amount column."""

    def __init__(self, row: int) -> None:
        msg = f"Invalid row {row}: missing address or amount"
        super().__init__(row, msg)


class InvalidAddress(LedgerError):
    """First column is not a 0x-prefixed 20-byte hex address."""

    def __init__(self, row: int, raw: str) -> None:
        self.raw = raw
        msg = f"Invalid address format at row {row}: {raw}"
        super().__init__(row, msg)


class MalformedAmount(LedgerError):
    """Amount column is not a plain decimal integer."""

    def __init__(self, row: int, raw: str) -> None:
        self.raw = raw
        msg = f"Invalid amount at row {row}: {raw}"
        super().__init__(row, msg)


class NonPositiveAmount(LedgerError):
    """Transfer amount is zero."""

    def __init__(self, row: int, amount: int) -> None:
        self.amount = amount
        msg = f"Amount must be positive at row {row}: {amount}"
        super().__init__(row, msg)


# Precondition errors


class InsufficientBalance(BulkSenderError):
    """Sender holds fewer tokens than the distribution total."""

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        msg = (
            f"Insufficient token balance. Required: {required}, "
            f"Available: {available}"
        )
        super().__init__(msg)


class ApprovalFailed(BulkSenderError):
    """Allowance is still below the required total after approving."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        msg = f"Approval failed. Expected: {expected}, Got: {actual}"
        super().__init__(msg)


class BatchSizeExceedsLimit(BulkSenderError):
    """Configured batch size is larger than the contract recipient limit."""

    def __init__(self, batch_size: int, limit: int) -> None:
        self.batch_size = batch_size
        self.limit = limit
        msg = f"Batch size {batch_size} exceeds contract recipient limit {limit}"
        super().__init__(msg)


# Execution errors


class SimulationFailed(BulkSenderError):
    """eth_call of the bulk transfer reverted or errored."""

    def __init__(self, batch_index: int, reason: str) -> None:
        self.batch_index = batch_index
        self.reason = reason
        msg = f"Simulation of batch {batch_index + 1} failed: {reason}"
        super().__init__(msg)


class TransactionReverted(BulkSenderError):
    """A confirmed transaction has a failed receipt status."""

    def __init__(self, tx_hash: str) -> None:
        self.tx_hash = tx_hash
        msg = f"Transaction {tx_hash} was reverted"
        super().__init__(msg)


class ConfirmationTimeout(BulkSenderError):
    """No receipt was observed for a transaction within the timeout."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        self.tx_hash = tx_hash
        self.timeout = timeout
        msg = f"Transaction {tx_hash} not confirmed after {timeout:g}s"
        super().__init__(msg)


class VerificationMismatch(BulkSenderError):
    """A sampled recipient's balance delta differs from the expected amount."""

    def __init__(self, address: str, expected: int, actual: int) -> None:
        self.address = address
        self.expected = expected
        self.actual = actual
        msg = (
            f"Transfer verification failed for {address}: "
            f"expected +{expected}, got {actual:+d}"
        )
        super().__init__(msg)


class BatchFailed(BulkSenderError):
    """A batch failed and halted the run.

    ``completed`` holds the results of every batch confirmed before the
    failure. Those transfers are final on chain.
    """

    def __init__(
        self,
        batch_index: int,
        batch_count: int,
        completed: list[Any],
        cause: BaseException,
    ) -> None:
        self.batch_index = batch_index
        self.batch_count = batch_count
        self.completed = completed
        self.cause = cause
        msg = (
            f"Batch {batch_index + 1}/{batch_count} failed after "
            f"{len(completed)} confirmed batch(es): {cause}"
        )
        super().__init__(msg)


__all__ = [
    "ApprovalFailed",
    "BatchFailed",
    "BatchSizeExceedsLimit",
    "BulkSenderError",
    "ConfirmationTimeout",
    "IncompleteRow",
    "InsufficientBalance",
    "InvalidAddress",
    "LedgerError",
    "MalformedAmount",
    "NonPositiveAmount",
    "SimulationFailed",
    "TransactionReverted",
    "VerificationMismatch",
]
