"""Capability interfaces for the on-chain collaborators.

Dispatch components depend on these narrow protocols instead of the concrete
bindings, so tests can substitute in-memory doubles.
"""

from typing import Protocol

from bulksender.helpers.rpc_models import TransactionReceipt


class BalanceReader(Protocol):
    """Reads token balances."""

    async def balance_of(self, address: str) -> int: ...


class AllowanceReader(Protocol):
    """Reads spending allowances."""

    async def allowance(self, owner: str, spender: str) -> int: ...


class TokenApprover(Protocol):
    """Submits approve transactions and returns their hash."""

    async def approve(self, spender: str, amount: int) -> str: ...


class GuardedToken(BalanceReader, AllowanceReader, TokenApprover, Protocol):
    """Token capabilities needed by the allowance guard."""


class ReceiptWaiter(Protocol):
    """Blocks until a transaction has a receipt."""

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt: ...


class BulkTransferContract(Protocol):
    """The bulk-transfer entry point of the BulkSender contract."""

    @property
    def address(self) -> str: ...

    async def simulate_bulk_send(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> None: ...

    async def estimate_bulk_send_gas(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> int: ...

    async def bulk_send(
        self,
        token: str,
        recipients: list[str],
        amounts: list[int],
        *,
        gas: int | None = None,
        value: int = 0,
    ) -> str: ...

    async def get_recipient_limit(self) -> int: ...


class IndexChooser(Protocol):
    """Chooses ``k`` distinct indices from ``range(population)``."""

    def sample(self, population: int, k: int) -> list[int]: ...


__all__ = [
    "AllowanceReader",
    "BalanceReader",
    "BulkTransferContract",
    "GuardedToken",
    "IndexChooser",
    "ReceiptWaiter",
    "TokenApprover",
]
