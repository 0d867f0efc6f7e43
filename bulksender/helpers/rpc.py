"""EVM JSON-RPC client utilities."""

from typing import Any

import httpx

from bulksender.helpers.constants import DEFAULT_TIMEOUT
from bulksender.helpers.parsers import parse_hex_int
from bulksender.helpers.rpc_models import JsonRpcRequest, TransactionReceipt


class RPCError(ValueError):
    """Error object returned by a JSON-RPC endpoint.

    ``data`` carries the raw revert payload for ``eth_call`` and
    ``eth_estimateGas`` failures when the node provides one.
    """

    def __init__(self, code: int | None, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        msg = f"RPC error: {message}" if code is None else f"RPC error {code}: {message}"
        super().__init__(msg)

    @classmethod
    def from_response(cls, error: Any) -> "RPCError":
        """Build an RPCError from the ``error`` member of a response."""
        if isinstance(error, dict):
            return cls(error.get("code"), str(error.get("message", "")), error.get("data"))
        return cls(None, str(error))


def _block_param(block: int | str) -> str:
    return hex(block) if isinstance(block, int) else block


class RPCClient:
    """EVM JSON-RPC client."""

    def __init__(self, rpc_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize RPC client.

        Args:
            rpc_url: JSON-RPC endpoint URL
            timeout: Default timeout for requests in seconds

        Raises:
            ValueError: If rpc_url is empty or None
        """
        if not rpc_url:
            msg = "RPC URL cannot be empty"
            raise ValueError(msg)

        self.rpc_url = rpc_url
        self.timeout = timeout

    async def call(
        self,
        client: httpx.AsyncClient,
        method: str,
        params: list[Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """Make a single JSON-RPC call.

        Args:
            client: HTTP client instance
            method: RPC method name (e.g., "eth_call")
            params: Method parameters list
            timeout: Optional timeout override

        Returns:
            RPC result value

        Raises:
            httpx.HTTPError: If the HTTP request fails
            RPCError: If the RPC response contains an error
        """
        payload = JsonRpcRequest(method=method, params=params or [], id=1)

        response = await client.post(
            self.rpc_url,
            json=payload.model_dump(),
            timeout=timeout or self.timeout,
        )
        response.raise_for_status()
        result = response.json()

        if "error" in result:
            raise RPCError.from_response(result["error"])

        return result.get("result")

    async def eth_call(
        self,
        client: httpx.AsyncClient,
        transaction: dict[str, Any],
        block: int | str = "latest",
    ) -> str:
        """Execute a message call without creating a transaction.

        Args:
            client: HTTP client instance
            transaction: Call object (``to``, ``data`` and optionally ``from``, ``value``)
            block: Block number or tag

        Returns:
            Hex-encoded return data
        """
        result = await self.call(
            client, "eth_call", [transaction, _block_param(block)]
        )
        return result or "0x"

    async def estimate_gas(
        self, client: httpx.AsyncClient, transaction: dict[str, Any]
    ) -> int:
        """Estimate gas for a transaction."""
        result = await self.call(client, "eth_estimateGas", [transaction])
        return parse_hex_int(result)

    async def get_transaction_count(
        self,
        client: httpx.AsyncClient,
        address: str,
        block: int | str = "pending",
    ) -> int:
        """Get the nonce of an account."""
        result = await self.call(
            client, "eth_getTransactionCount", [address, _block_param(block)]
        )
        return parse_hex_int(result)

    async def gas_price(self, client: httpx.AsyncClient) -> int:
        """Get the node's suggested legacy gas price in wei."""
        result = await self.call(client, "eth_gasPrice", [])
        return parse_hex_int(result)

    async def chain_id(self, client: httpx.AsyncClient) -> int:
        """Get the chain ID of the connected network."""
        result = await self.call(client, "eth_chainId", [])
        return parse_hex_int(result)

    async def send_raw_transaction(
        self, client: httpx.AsyncClient, raw_transaction: str
    ) -> str:
        """Broadcast a signed transaction.

        Returns:
            Transaction hash
        """
        return await self.call(client, "eth_sendRawTransaction", [raw_transaction])

    async def get_transaction_receipt(
        self, client: httpx.AsyncClient, tx_hash: str
    ) -> TransactionReceipt | None:
        """Get a transaction receipt, or None while the transaction is pending."""
        result = await self.call(client, "eth_getTransactionReceipt", [tx_hash])
        if not result:
            return None
        return TransactionReceipt.model_validate(result)

    async def get_block_gas_limit(
        self, client: httpx.AsyncClient, block: int | str = "latest"
    ) -> int:
        """Get the gas limit of a block."""
        result = await self.call(
            client, "eth_getBlockByNumber", [_block_param(block), False]
        )
        return parse_hex_int((result or {}).get("gasLimit"))


__all__ = [
    "RPCClient",
    "RPCError",
]
