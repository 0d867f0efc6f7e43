"""Parsing utilities for addresses, token amounts and hex quantities."""

import re


ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
AMOUNT_PATTERN = re.compile(r"^\d+$")


def is_address(value: str | None) -> bool:
    """Check whether a string is a 0x-prefixed 20-byte hex address.

    Example:
        >>> is_address("0x8036Ccb4dDdab20aDB595418EC2089B1f533c9fE")
        True
        >>> is_address("0x1234")
        False
    """
    if not value:
        return False
    return ADDRESS_PATTERN.match(value) is not None


def normalize_address(address: str) -> str:
    """Return the canonical mapping key for an address (trimmed, lowercase).

    Example:
        >>> normalize_address(" 0xAbC0000000000000000000000000000000000001 ")
        '0xabc0000000000000000000000000000000000001'
    """
    return address.strip().lower()


def parse_amount(raw: str) -> int:
    """Parse a decimal integer token amount.

    Surrounding whitespace and quotes and any thousands separators are
    removed before validation. Quotes or whitespace inside the number are
    rejected. Signs, decimal points, exponents and letters are rejected.

    Args:
        raw: Amount text as read from a CSV cell

    Returns:
        int: Parsed amount (arbitrary precision)

    Raises:
        ValueError: If the cleaned text is not a plain decimal integer

    Example:
        >>> parse_amount('"1,000,000"')
        1000000
        >>> parse_amount("-5")
        Traceback (most recent call last):
        ...
        ValueError: Invalid amount format: -5
    """
    cleaned = raw.strip().strip("\"'").strip().replace(",", "")
    if not AMOUNT_PATTERN.match(cleaned):
        msg = f"Invalid amount format: {raw}"
        raise ValueError(msg)
    return int(cleaned)


def format_amount(amount: int, *, separators: bool = False) -> str:
    """Format an integer amount as decimal text, optionally with commas.

    Example:
        >>> format_amount(1234567, separators=True)
        '1,234,567'
    """
    return f"{amount:,}" if separators else str(amount)


def format_units(amount: int, decimals: int) -> str:
    """Render a raw token amount in whole-token units without float rounding.

    Example:
        >>> format_units(1500000000000000000, 18)
        '1.5'
        >>> format_units(-20, 1)
        '-2'
    """
    if decimals <= 0:
        return str(amount)
    sign = "-" if amount < 0 else ""
    digits = str(abs(amount)).rjust(decimals + 1, "0")
    whole, fraction = digits[:-decimals], digits[-decimals:].rstrip("0")
    return f"{sign}{whole}.{fraction}" if fraction else f"{sign}{whole}"


def parse_hex_int(hex_value: str | None, default: int = 0) -> int:
    """Parse hex string to integer.

    Args:
        hex_value: Hex-encoded string or None
        default: Default value if hex_value is None or empty

    Returns:
        int: Parsed integer value

    Example:
        >>> parse_hex_int("0xff")
        255
        >>> parse_hex_int(None, 0)
        0
    """
    if not hex_value:
        return default
    return int(hex_value, 16)


__all__ = [
    "ADDRESS_PATTERN",
    "AMOUNT_PATTERN",
    "format_amount",
    "format_units",
    "is_address",
    "normalize_address",
    "parse_amount",
    "parse_hex_int",
]
