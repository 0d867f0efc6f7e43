"""Sequential orchestration of a complete distribution run."""

import logging
from collections.abc import Sequence

import httpx

from bulksender.contracts.interfaces import BulkTransferContract
from bulksender.dispatch.driver import BatchTransferDriver
from bulksender.dispatch.guard import AllowanceGuard
from bulksender.dispatch.models import BatchResult, DispatchSummary
from bulksender.errors import BatchFailed, BatchSizeExceedsLimit, BulkSenderError
from bulksender.helpers.logging import get_logger
from bulksender.helpers.rpc import RPCError
from bulksender.ledger.models import TransferEntry
from bulksender.ledger.partition import create_batches


class DispatchRun:
    """Owns the sender account for the duration of one distribution.

    Preconditions are checked once on the run total. Batches then run one at
    a time; the first failure stops the run and is raised as
    :class:`BatchFailed` together with the batches already confirmed.
    """

    def __init__(
        self,
        token_address: str,
        contract: BulkTransferContract,
        guard: AllowanceGuard,
        driver: BatchTransferDriver,
        batch_size: int,
        logger: logging.Logger | None = None,
    ) -> None:
        self.token_address = token_address
        self.contract = contract
        self.guard = guard
        self.driver = driver
        self.batch_size = batch_size
        self.logger = logger or get_logger("bulksender.runner")

    async def check_batch_size(self) -> int:
        """Read the contract recipient limit and validate the batch size.

        Raises:
            BatchSizeExceedsLimit: If batch_size is above the limit
        """
        limit = await self.contract.get_recipient_limit()
        self.logger.info(f"Contract recipient limit: {limit}")
        if self.batch_size > limit:
            raise BatchSizeExceedsLimit(self.batch_size, limit)
        return limit

    async def run(self, entries: Sequence[TransferEntry]) -> DispatchSummary:
        """Distribute every entry.

        Raises:
            InsufficientBalance: Before any transfer
            ApprovalFailed: Before any transfer
            BatchSizeExceedsLimit: Before any transfer
            BatchFailed: When a batch fails; earlier batches are final
        """
        if not entries:
            msg = "No transfer entries to send"
            raise ValueError(msg)

        total = sum(entry.amount for entry in entries)
        self.logger.info(f"Total amount to send: {total}")

        await self.check_batch_size()
        batches = create_batches(entries, self.batch_size)
        self.logger.info(
            f"Processing {len(entries)} recipients in {len(batches)} batches "
            f"of up to {self.batch_size}"
        )

        await self.guard.prepare(total)

        completed: list[BatchResult] = []
        for batch in batches:
            try:
                result = await self.driver.execute(batch, len(batches))
            except (BulkSenderError, RPCError, httpx.HTTPError) as e:
                self.logger.error(f"Error processing batch {batch.index + 1}: {e}")
                raise BatchFailed(batch.index, len(batches), completed, e) from e
            completed.append(result)

        self.logger.info("All batches processed successfully")
        return DispatchSummary(
            token=self.token_address,
            bulk_sender=self.contract.address,
            total_amount=total,
            recipient_count=len(entries),
            batches=completed,
        )


__all__ = ["DispatchRun"]
