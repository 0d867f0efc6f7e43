"""Balance and allowance preconditions for a distribution run."""

import logging
from enum import StrEnum

from bulksender.contracts.interfaces import GuardedToken, ReceiptWaiter
from bulksender.dispatch.confirmation import confirm_transaction
from bulksender.errors import ApprovalFailed, InsufficientBalance
from bulksender.helpers.logging import get_logger


class AllowanceState(StrEnum):
    """States of the allowance check/approve sequence."""

    UNKNOWN = "unknown"
    CHECKED_SUFFICIENT = "checked_sufficient"
    CHECKED_INSUFFICIENT = "checked_insufficient"
    RESETTING = "resetting"
    APPROVING = "approving"
    APPROVED = "approved"


class AllowanceGuard:
    """Makes sure the sender can fund the whole distribution.

    The balance check and any approval happen once, on the run total, before
    the first batch is submitted. Existing non-zero allowances are reset to
    zero before approving, for tokens (USDT and similar) that reject changing
    one non-zero allowance to another.
    """

    def __init__(
        self,
        token: GuardedToken,
        waiter: ReceiptWaiter,
        owner: str,
        spender: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.token = token
        self.waiter = waiter
        self.owner = owner
        self.spender = spender
        self.logger = logger or get_logger("bulksender.guard")
        self.state = AllowanceState.UNKNOWN
        self.history: list[AllowanceState] = [AllowanceState.UNKNOWN]
        self.transactions: list[str] = []

    def _transition(self, state: AllowanceState) -> None:
        self.state = state
        self.history.append(state)

    async def check_balance(self, required: int) -> int:
        """Confirm the owner holds at least ``required`` tokens.

        Raises:
            InsufficientBalance: If the balance is lower than required
        """
        balance = await self.token.balance_of(self.owner)
        if balance < required:
            raise InsufficientBalance(required, balance)

        self.logger.info(f"Token balance: {balance}")
        return balance

    async def _approve(self, amount: int) -> None:
        tx_hash = await self.token.approve(self.spender, amount)
        self.transactions.append(tx_hash)
        self.logger.info(f"Approval transaction: {tx_hash}")
        await confirm_transaction(self.waiter, tx_hash, self.logger)

    async def ensure_allowance(self, required: int) -> int:
        """Establish an allowance of at least ``required`` for the spender.

        Returns:
            The allowance in place when the method returns

        Raises:
            ApprovalFailed: If the re-read allowance is still too low
            TransactionReverted: If the reset or approval reverted
        """
        current = await self.token.allowance(self.owner, self.spender)
        self.logger.info(f"Current allowance: {current}")

        if current >= required:
            self._transition(AllowanceState.CHECKED_SUFFICIENT)
            self.logger.info(f"Sufficient allowance already exists: {current}")
            return current

        self._transition(AllowanceState.CHECKED_INSUFFICIENT)
        self.logger.info(f"Insufficient allowance. Approving {required} tokens...")

        if current > 0:
            self._transition(AllowanceState.RESETTING)
            self.logger.info("Resetting existing allowance to 0...")
            await self._approve(0)

        self._transition(AllowanceState.APPROVING)
        await self._approve(required)

        new_allowance = await self.token.allowance(self.owner, self.spender)
        if new_allowance < required:
            raise ApprovalFailed(required, new_allowance)

        self._transition(AllowanceState.APPROVED)
        self.logger.info(f"Approval successful. New allowance: {new_allowance}")
        return new_allowance

    async def prepare(self, required: int) -> None:
        """Run the balance check, then the allowance check/approval."""
        await self.check_balance(required)
        await self.ensure_allowance(required)


__all__ = [
    "AllowanceGuard",
    "AllowanceState",
]
