"""BulkSender contract binding over JSON-RPC."""

import httpx

from bulksender.contracts.abi import (
    BULK_SEND_ERC20_DIFFERENT,
    GET_RECIPIENT_LIMIT,
    SET_RECIPIENT_LIMIT,
    decode_uint,
    encode_call,
)
from bulksender.contracts.signer import TransactionSender
from bulksender.helpers.rpc import RPCClient


class BulkSender:
    """Calls into a deployed BulkSender contract on behalf of one sender.

    Simulation and gas estimation run as the sender, since the contract pulls
    tokens from ``msg.sender`` through its allowance.
    """

    def __init__(
        self,
        address: str,
        rpc: RPCClient,
        client: httpx.AsyncClient,
        sender: TransactionSender,
    ) -> None:
        self._address = address
        self.rpc = rpc
        self.client = client
        self.sender = sender

    @property
    def address(self) -> str:
        return self._address

    @staticmethod
    def encode_bulk_send(token: str, recipients: list[str], amounts: list[int]) -> str:
        """Calldata for ``bulkSendERC20Different(token, recipients, amounts)``."""
        return encode_call(BULK_SEND_ERC20_DIFFERENT, token, recipients, amounts)

    async def simulate_bulk_send(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> None:
        """Dry-run the bulk transfer with eth_call.

        Raises:
            RPCError: If the call reverts; ``data`` holds the revert payload
        """
        await self.sender.call(
            self.address, self.encode_bulk_send(token, recipients, amounts), value=value
        )

    async def estimate_bulk_send_gas(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> int:
        """Estimate gas for the bulk transfer (no buffer applied)."""
        return await self.sender.estimate_gas(
            self.address, self.encode_bulk_send(token, recipients, amounts), value=value
        )

    async def bulk_send(
        self,
        token: str,
        recipients: list[str],
        amounts: list[int],
        *,
        gas: int | None = None,
        value: int = 0,
    ) -> str:
        """Submit the bulk transfer and return its transaction hash.

        When ``gas`` is None no estimate is attempted again and the
        transaction is sent with the block gas limit as its ceiling.
        """
        return await self.sender.send(
            self.address,
            self.encode_bulk_send(token, recipients, amounts),
            gas=gas,
            value=value,
            estimate=False,
        )

    async def get_recipient_limit(self) -> int:
        """Maximum recipients accepted in one bulk transfer."""
        result = await self.rpc.eth_call(
            self.client, {"to": self.address, "data": encode_call(GET_RECIPIENT_LIMIT)}
        )
        return decode_uint(result)

    async def set_recipient_limit(self, limit: int) -> str:
        """Submit ``setRecipientLimit(limit)``. Only the contract owner may call it."""
        return await self.sender.send(
            self.address, encode_call(SET_RECIPIENT_LIMIT, limit)
        )


__all__ = [
    "BulkSender",
]
