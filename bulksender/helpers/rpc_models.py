"""Pydantic models for JSON-RPC requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bulksender.helpers.parsers import parse_hex_int


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request model."""

    jsonrpc: str = Field(default="2.0", description="JSON-RPC version")
    method: str = Field(..., description="Method name to call")
    params: list[Any] = Field(
        default_factory=list, description="Method parameters"
    )
    id: int | str = Field(..., description="Request ID")


class TransactionReceipt(BaseModel):
    """Receipt returned by eth_getTransactionReceipt.

    Hex quantities are parsed to ints on validation. ``status`` is 1 for a
    successful transaction and 0 for a revert.
    """

    transaction_hash: str = Field(
        ..., description="Transaction hash", alias="transactionHash"
    )
    block_number: int = Field(
        ..., description="Block the transaction was included in", alias="blockNumber"
    )
    status: int = Field(..., description="1 on success, 0 on revert")
    gas_used: int | None = Field(
        default=None, description="Gas consumed", alias="gasUsed"
    )
    from_address: str | None = Field(
        default=None, description="Sender address", alias="from"
    )
    to_address: str | None = Field(
        default=None, description="Recipient contract", alias="to"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("block_number", "status", "gas_used", mode="before")
    @classmethod
    def _parse_hex_quantity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_hex_int(value)
        return value

    @property
    def succeeded(self) -> bool:
        """Whether the transaction executed without reverting."""
        return self.status == 1


__all__ = [
    "JsonRpcRequest",
    "TransactionReceipt",
]
