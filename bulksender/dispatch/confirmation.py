"""Wait for a write to confirm and reject reverted receipts."""

import logging

from bulksender.contracts.interfaces import ReceiptWaiter
from bulksender.errors import TransactionReverted
from bulksender.helpers.rpc_models import TransactionReceipt


async def confirm_transaction(
    waiter: ReceiptWaiter, tx_hash: str, logger: logging.Logger
) -> TransactionReceipt:
    """Await one confirmation of ``tx_hash``.

    Raises:
        TransactionReverted: If the receipt status is failed
    """
    logger.info(f"Waiting for transaction {tx_hash} to be confirmed...")
    receipt = await waiter.wait_for_receipt(tx_hash)

    if not receipt.succeeded:
        logger.error(f"Transaction {tx_hash} was reverted in block {receipt.block_number}")
        raise TransactionReverted(tx_hash)

    logger.info(f"Transaction {tx_hash} confirmed in block {receipt.block_number}")
    return receipt


__all__ = ["confirm_transaction"]
