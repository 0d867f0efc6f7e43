"""Transaction signing, broadcasting and confirmation for one sender account."""

import asyncio
import logging

from typing import Any

import httpx
from eth_account import Account
from eth_utils import encode_hex, to_checksum_address

from bulksender.errors import ConfirmationTimeout
from bulksender.helpers.constants import (
    CONFIRMATION_TIMEOUT,
    GAS_BUFFER_PERCENT,
    RECEIPT_POLL_INTERVAL,
)
from bulksender.helpers.logging import get_logger
from bulksender.helpers.rpc import RPCClient, RPCError
from bulksender.helpers.rpc_models import TransactionReceipt


def add_gas_buffer(gas: int, percent: int = GAS_BUFFER_PERCENT) -> int:
    """Pad a gas estimate by ``percent`` (integer arithmetic).

    Example:
        >>> add_gas_buffer(100_000)
        110000
    """
    return gas + gas * percent // 100


class TransactionSender:
    """Single writer for a sender account.

    Signs legacy transactions locally with ``eth_account`` and broadcasts them
    through ``eth_sendRawTransaction``. Writes are strictly ordered: a new
    transaction cannot be sent until the receipt of the previous one has been
    observed through :meth:`wait_for_receipt`.
    """

    def __init__(
        self,
        rpc: RPCClient,
        client: httpx.AsyncClient,
        private_key: str,
        *,
        chain_id: int | None = None,
        confirmation_timeout: float = CONFIRMATION_TIMEOUT,
        poll_interval: float = RECEIPT_POLL_INTERVAL,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the sender.

        Args:
            rpc: JSON-RPC client
            client: HTTP client instance
            private_key: Hex private key of the sender account
            chain_id: Chain ID, read from the node when omitted
            confirmation_timeout: Seconds to wait for a receipt
            poll_interval: Seconds between receipt polls
            logger: Optional logger override
        """
        self.rpc = rpc
        self.client = client
        self.account = Account.from_key(private_key)
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval
        self.logger = logger or get_logger("bulksender.signer")
        self._chain_id = chain_id
        self._pending: str | None = None

    @property
    def address(self) -> str:
        """Checksummed sender address."""
        return self.account.address

    @property
    def pending_transaction(self) -> str | None:
        """Hash of the write awaiting confirmation, if any."""
        return self._pending

    async def chain_id(self) -> int:
        if self._chain_id is None:
            self._chain_id = await self.rpc.chain_id(self.client)
        return self._chain_id

    def _call_object(self, to: str, data: str, value: int) -> dict[str, Any]:
        call: dict[str, Any] = {
            "from": self.address,
            "to": to_checksum_address(to),
            "data": data,
        }
        if value:
            call["value"] = hex(value)
        return call

    async def call(self, to: str, data: str, *, value: int = 0) -> str:
        """Run ``eth_call`` as the sender and return the raw result."""
        return await self.rpc.eth_call(self.client, self._call_object(to, data, value))

    async def estimate_gas(self, to: str, data: str, *, value: int = 0) -> int:
        """Estimate gas for a call made by the sender."""
        return await self.rpc.estimate_gas(
            self.client, self._call_object(to, data, value)
        )

    async def _resolve_gas(
        self, to: str, data: str, value: int, *, estimate: bool
    ) -> int:
        if estimate:
            try:
                return add_gas_buffer(await self.estimate_gas(to, data, value=value))
            except (RPCError, httpx.HTTPError) as e:
                self.logger.warning(f"Could not estimate gas: {e}")

        gas_limit = await self.rpc.get_block_gas_limit(self.client)
        self.logger.warning(
            f"Sending without a gas estimate, using block gas limit {gas_limit}"
        )
        return gas_limit

    async def send(
        self,
        to: str,
        data: str,
        *,
        gas: int | None = None,
        value: int = 0,
        estimate: bool = True,
    ) -> str:
        """Sign and broadcast a transaction.

        Args:
            to: Target contract address
            data: Hex calldata
            gas: Gas limit; estimated (plus buffer) when omitted
            value: Wei attached to the call
            estimate: When ``gas`` is None, try eth_estimateGas before
                falling back to the latest block gas limit

        Returns:
            Transaction hash

        Raises:
            RuntimeError: If a previous write is still unconfirmed
            RPCError: If the node rejects the transaction
        """
        if self._pending is not None:
            msg = (
                f"Cannot send a new transaction while {self._pending} "
                "is awaiting confirmation"
            )
            raise RuntimeError(msg)

        if gas is None:
            gas = await self._resolve_gas(to, data, value, estimate=estimate)

        nonce = await self.rpc.get_transaction_count(self.client, self.address, "pending")
        gas_price = await self.rpc.gas_price(self.client)

        transaction = {
            "to": to_checksum_address(to),
            "data": data,
            "value": value,
            "gas": gas,
            "gasPrice": gas_price,
            "nonce": nonce,
            "chainId": await self.chain_id(),
        }
        signed = self.account.sign_transaction(transaction)
        tx_hash = await self.rpc.send_raw_transaction(
            self.client, encode_hex(signed.raw_transaction)
        )

        self._pending = tx_hash
        self.logger.debug(f"Sent transaction {tx_hash} (nonce {nonce}, gas {gas})")
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt:
        """Poll until the transaction is included in a block.

        Raises:
            ConfirmationTimeout: If no receipt appears within the timeout
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.confirmation_timeout

        while True:
            receipt = await self.rpc.get_transaction_receipt(self.client, tx_hash)
            if receipt is not None:
                if self._pending == tx_hash:
                    self._pending = None
                return receipt

            if loop.time() >= deadline:
                raise ConfirmationTimeout(tx_hash, self.confirmation_timeout)
            await asyncio.sleep(self.poll_interval)


__all__ = [
    "TransactionSender",
    "add_gas_buffer",
]
