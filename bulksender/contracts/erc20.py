"""ERC20 token binding over JSON-RPC."""

import httpx

from bulksender.contracts.abi import (
    ALLOWANCE,
    APPROVE,
    BALANCE_OF,
    DECIMALS,
    SYMBOL,
    decode_string,
    decode_uint,
    encode_call,
)
from bulksender.contracts.signer import TransactionSender
from bulksender.helpers.constants import DEFAULT_TOKEN_DECIMALS, DEFAULT_TOKEN_SYMBOL
from bulksender.helpers.logging import get_logger
from bulksender.helpers.rpc import RPCClient, RPCError


logger = get_logger(__name__)


class ERC20Token:
    """Reads and approvals against one ERC20 contract.

    Reads go straight through ``eth_call``. ``approve`` needs a
    :class:`TransactionSender` and is the only write.
    """

    def __init__(
        self,
        address: str,
        rpc: RPCClient,
        client: httpx.AsyncClient,
        sender: TransactionSender | None = None,
    ) -> None:
        self.address = address
        self.rpc = rpc
        self.client = client
        self.sender = sender

    async def _read(self, data: str) -> str:
        return await self.rpc.eth_call(self.client, {"to": self.address, "data": data})

    async def balance_of(self, address: str) -> int:
        """Token balance of ``address`` in base units."""
        return decode_uint(await self._read(encode_call(BALANCE_OF, address)))

    async def allowance(self, owner: str, spender: str) -> int:
        """Amount ``spender`` may still transfer on behalf of ``owner``."""
        return decode_uint(await self._read(encode_call(ALLOWANCE, owner, spender)))

    async def approve(self, spender: str, amount: int) -> str:
        """Submit ``approve(spender, amount)`` and return the transaction hash."""
        if self.sender is None:
            msg = "ERC20Token needs a TransactionSender to approve"
            raise RuntimeError(msg)
        return await self.sender.send(self.address, encode_call(APPROVE, spender, amount))

    async def decimals(self) -> int:
        """Token decimals, or 18 when the token does not implement decimals()."""
        try:
            return decode_uint(await self._read(encode_call(DECIMALS)))
        except (RPCError, httpx.HTTPError) as e:
            logger.warning(f"Error getting token decimals for {self.address}: {e}")
            return DEFAULT_TOKEN_DECIMALS

    async def symbol(self) -> str:
        """Token symbol, or ``TOKEN`` when it cannot be read."""
        try:
            return decode_string(await self._read(encode_call(SYMBOL)))
        except (RPCError, httpx.HTTPError) as e:
            logger.warning(f"Error getting token symbol for {self.address}: {e}")
            return DEFAULT_TOKEN_SYMBOL


__all__ = ["ERC20Token"]
