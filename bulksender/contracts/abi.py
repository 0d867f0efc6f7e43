"""ABI encoding for the ERC20 and BulkSender functions used off-chain."""

from collections.abc import Sequence

from typing import Any

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import (
    decode_hex,
    encode_hex,
    function_signature_to_4byte_selector,
    to_checksum_address,
)

from bulksender.helpers.rpc import RPCError


# ERC20
BALANCE_OF = "balanceOf(address)"
ALLOWANCE = "allowance(address,address)"
APPROVE = "approve(address,uint256)"
DECIMALS = "decimals()"
SYMBOL = "symbol()"

# BulkSender
BULK_SEND_ERC20_DIFFERENT = "bulkSendERC20Different(address,address[],uint256[])"
GET_RECIPIENT_LIMIT = "getRecipientLimit()"
SET_RECIPIENT_LIMIT = "setRecipientLimit(uint256)"

# Error(string)
ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")


def argument_types(signature: str) -> list[str]:
    """Extract the argument type list from a flat function signature.

    Example:
        >>> argument_types("approve(address,uint256)")
        ['address', 'uint256']
        >>> argument_types("decimals()")
        []
    """
    inner = signature[signature.index("(") + 1 : signature.rindex(")")]
    return [arg for arg in inner.split(",") if arg]


def _checksum(value: Any) -> Any:
    if isinstance(value, str):
        return to_checksum_address(value)
    return [_checksum(item) for item in value]


def encode_call(signature: str, *args: Any) -> str:
    """Build hex calldata for ``signature`` with positional ``args``.

    Address arguments are checksummed first so mixed-case source
    addresses encode the same as lowercase ones.
    """
    types = argument_types(signature)
    if len(types) != len(args):
        msg = f"{signature} takes {len(types)} argument(s), got {len(args)}"
        raise ValueError(msg)

    values = [
        _checksum(arg) if arg_type.startswith("address") else arg
        for arg_type, arg in zip(types, args, strict=True)
    ]
    selector = function_signature_to_4byte_selector(signature)
    return encode_hex(selector + encode(types, values))


def decode_result(types: Sequence[str], data: str) -> tuple[Any, ...]:
    """Decode eth_call return data.

    Raises:
        RPCError: If the data does not decode as ``types``, e.g. the empty
            ``0x`` returned by an address without code
    """
    try:
        return decode(list(types), decode_hex(data))
    except (DecodingError, ValueError) as e:
        msg = f"Cannot decode result as ({','.join(types)}): {data!r}"
        raise RPCError(None, msg) from e


def decode_uint(data: str) -> int:
    """Decode a single uint256 return value."""
    (value,) = decode_result(["uint256"], data)
    return int(value)


def decode_string(data: str) -> str:
    """Decode a single string return value."""
    (value,) = decode_result(["string"], data)
    return str(value)


def decode_revert_reason(data: Any) -> str | None:
    """Decode an ``Error(string)`` revert payload.

    Nodes report revert data either as a hex string or nested in a dict
    (``{"data": "0x..."}``). Returns None for custom errors, panics and
    anything that does not decode.
    """
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, str) or not data.startswith("0x"):
        return None

    try:
        payload = decode_hex(data)
    except ValueError:
        return None

    if payload[:4] != ERROR_STRING_SELECTOR:
        return None

    try:
        (reason,) = decode(["string"], payload[4:])
    except (DecodingError, UnicodeDecodeError):
        return None
    return str(reason)


__all__ = [
    "ALLOWANCE",
    "APPROVE",
    "BALANCE_OF",
    "BULK_SEND_ERC20_DIFFERENT",
    "DECIMALS",
    "ERROR_STRING_SELECTOR",
    "GET_RECIPIENT_LIMIT",
    "SET_RECIPIENT_LIMIT",
    "SYMBOL",
    "argument_types",
    "decode_result",
    "decode_revert_reason",
    "decode_string",
    "decode_uint",
    "encode_call",
]
