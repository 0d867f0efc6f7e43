"""Common Pydantic types used across the application."""

from typing import Annotated

from pydantic import PlainSerializer


BigInt = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]
"""Arbitrary precision integer serialized to JSON as a decimal string.

uint256 balances exceed the range JSON consumers can represent exactly as
numbers, so reports carry them as strings.
"""


__all__ = ["BigInt"]
