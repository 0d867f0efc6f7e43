"""Pydantic models for transfer lists and batches."""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bulksender.helpers.parsers import is_address, normalize_address


class TransferEntry(BaseModel):
    """One recipient row of a transfer list."""

    address: str = Field(..., description="Lowercase address used as mapping key")
    raw_address: str = Field(
        ..., description="Address as written in the source, sent on chain"
    )
    amount: int = Field(..., gt=0, description="Token amount in base units")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_address(cls, address: str, amount: int) -> "TransferEntry":
        """Build an entry, deriving the normalized key from ``address``."""
        raw = address.strip()
        return cls(address=normalize_address(raw), raw_address=raw, amount=amount)

    @field_validator("raw_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not is_address(value):
            msg = f"Invalid address format: {value}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _check_key(self) -> "TransferEntry":
        if self.address != normalize_address(self.raw_address):
            msg = "address must be the lowercase form of raw_address"
            raise ValueError(msg)
        return self


class Batch(BaseModel):
    """A contiguous, non-empty slice of a transfer list sent in one call."""

    index: int = Field(..., ge=0, description="0-based position in the run")
    entries: tuple[TransferEntry, ...] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def recipients(self) -> list[str]:
        """Recipient addresses in source casing, in batch order."""
        return [entry.raw_address for entry in self.entries]

    @property
    def amounts(self) -> list[int]:
        """Amounts aligned with :attr:`recipients`."""
        return [entry.amount for entry in self.entries]

    @property
    def total(self) -> int:
        """Sum of all amounts in the batch."""
        return sum(entry.amount for entry in self.entries)


__all__ = [
    "Batch",
    "TransferEntry",
]
