"""Execute one batch against the BulkSender contract."""

import logging

import httpx

from bulksender.contracts.abi import decode_revert_reason
from bulksender.contracts.interfaces import BulkTransferContract, ReceiptWaiter
from bulksender.contracts.signer import add_gas_buffer
from bulksender.dispatch.confirmation import confirm_transaction
from bulksender.dispatch.models import BatchResult
from bulksender.dispatch.sampling import SamplingVerifier
from bulksender.errors import SimulationFailed
from bulksender.helpers.logging import get_logger
from bulksender.helpers.rpc import RPCError
from bulksender.ledger.models import Batch


class BatchTransferDriver:
    """Runs a batch through simulate, estimate, submit, confirm and verify.

    Any failure propagates to the caller and halts the run. Gas estimation is
    the one step allowed to fail: the transaction is then sent without an
    estimate and the sender falls back to the block gas limit.
    """

    def __init__(
        self,
        token_address: str,
        contract: BulkTransferContract,
        waiter: ReceiptWaiter,
        verifier: SamplingVerifier,
        logger: logging.Logger | None = None,
        *,
        value: int = 0,
    ) -> None:
        self.token_address = token_address
        self.contract = contract
        self.waiter = waiter
        self.verifier = verifier
        self.logger = logger or get_logger("bulksender.driver")
        self.value = value

    async def simulate(self, batch: Batch) -> None:
        """Dry-run the batch.

        Raises:
            SimulationFailed: With the decoded revert reason when available
        """
        try:
            await self.contract.simulate_bulk_send(
                self.token_address, batch.recipients, batch.amounts, value=self.value
            )
        except RPCError as e:
            reason = decode_revert_reason(e.data) or e.message
            raise SimulationFailed(batch.index, reason) from e
        except httpx.HTTPError as e:
            raise SimulationFailed(batch.index, str(e)) from e

    async def estimate_gas(self, batch: Batch) -> int | None:
        """Gas estimate for the batch, or None when the node cannot estimate."""
        try:
            return await self.contract.estimate_bulk_send_gas(
                self.token_address, batch.recipients, batch.amounts, value=self.value
            )
        except (RPCError, httpx.HTTPError) as e:
            self.logger.warning(
                f"Gas estimation failed for batch {batch.index + 1}, "
                f"sending without a gas estimate: {e}"
            )
            return None

    async def execute(self, batch: Batch, batch_count: int | None = None) -> BatchResult:
        """Send one batch and verify a sample of its recipients.

        Args:
            batch: Batch to send
            batch_count: Total number of batches, for log output only

        Returns:
            BatchResult of the confirmed batch

        Raises:
            SimulationFailed: If the dry run reverts
            TransactionReverted: If the receipt has a failed status
            ConfirmationTimeout: If the transaction is not mined in time
            VerificationMismatch: If a sampled balance delta is wrong
        """
        label = f"{batch.index + 1}/{batch_count}" if batch_count else f"{batch.index + 1}"
        self.logger.info(
            f"Processing batch {label} with {len(batch)} recipients, "
            f"total {batch.total}"
        )

        samples = await self.verifier.prepare(batch)

        await self.simulate(batch)
        self.logger.info(f"Simulation of batch {label} succeeded")

        gas_estimate = await self.estimate_gas(batch)
        gas = add_gas_buffer(gas_estimate) if gas_estimate is not None else None
        if gas_estimate is not None:
            self.logger.info(f"Estimated gas: {gas_estimate} (limit {gas})")

        tx_hash = await self.contract.bulk_send(
            self.token_address,
            batch.recipients,
            batch.amounts,
            gas=gas,
            value=self.value,
        )
        self.logger.info(f"Batch {label} transaction: {tx_hash}")

        receipt = await confirm_transaction(self.waiter, tx_hash, self.logger)
        verified = await self.verifier.verify(samples)

        self.logger.info(f"Batch {label} completed successfully")
        return BatchResult(
            index=batch.index,
            recipient_count=len(batch),
            total_amount=batch.total,
            tx_hash=tx_hash,
            block_number=receipt.block_number,
            gas_estimate=gas_estimate,
            gas_used=receipt.gas_used,
            samples_verified=verified,
        )


__all__ = ["BatchTransferDriver"]
