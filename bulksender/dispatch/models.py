"""Pydantic models for dispatch configuration and results."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bulksender.helpers.config import (
    get_float_env,
    get_int_env,
    get_optional_env,
    get_required_env,
)
from bulksender.helpers.constants import CONFIRMATION_TIMEOUT, DEFAULT_BATCH_SIZE
from bulksender.helpers.models import BigInt
from bulksender.helpers.parsers import is_address


class VerificationSample(BaseModel):
    """A recipient whose balance is checked before and after a batch."""

    address: str
    expected_amount: BigInt = Field(..., alias="expectedAmount")
    initial_balance: BigInt = Field(..., alias="initialBalance")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BatchResult(BaseModel):
    """Outcome of one confirmed and verified batch."""

    index: int = Field(..., description="0-based batch index")
    recipient_count: int = Field(..., alias="recipientCount")
    total_amount: BigInt = Field(..., alias="totalAmount")
    tx_hash: str = Field(..., alias="txHash")
    block_number: int = Field(..., alias="blockNumber")
    gas_estimate: int | None = Field(default=None, alias="gasEstimate")
    gas_used: int | None = Field(default=None, alias="gasUsed")
    samples_verified: int = Field(default=0, alias="samplesVerified")

    model_config = ConfigDict(populate_by_name=True)


class DispatchSummary(BaseModel):
    """Result of a complete distribution run."""

    token: str
    bulk_sender: str = Field(..., alias="bulkSender")
    total_amount: BigInt = Field(..., alias="totalAmount")
    recipient_count: int = Field(..., alias="recipientCount")
    batches: list[BatchResult] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def batch_count(self) -> int:
        return len(self.batches)


class DispatchConfig(BaseModel):
    """Settings of a distribution run, read from the environment by default."""

    token_address: str
    bulk_sender_address: str
    csv_file: Path
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    value: int = Field(default=0, ge=0, description="Wei attached to each bulk send")
    confirmation_timeout: float = Field(default=CONFIRMATION_TIMEOUT, gt=0)
    output: Path | None = None

    @field_validator("token_address", "bulk_sender_address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        value = value.strip()
        if not is_address(value):
            msg = f"Invalid contract address: {value!r}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_env(cls, **overrides: object) -> "DispatchConfig":
        """Build the configuration from environment variables.

        ``TOKEN_ADDRESS`` and ``BULK_SENDER_ADDRESS`` are required.
        Keyword overrides that are not None take precedence.

        Raises:
            ValueError: If a required variable is missing
            pydantic.ValidationError: If a value is invalid
        """
        values: dict[str, object] = {
            "csv_file": get_optional_env("CSV_FILE", "data/recipients.csv"),
            "batch_size": get_int_env("BATCH_SIZE", DEFAULT_BATCH_SIZE),
            "value": get_int_env("BULK_SEND_VALUE", 0),
            "confirmation_timeout": get_float_env(
                "CONFIRMATION_TIMEOUT", CONFIRMATION_TIMEOUT
            ),
        }
        for field, env_key in (
            ("token_address", "TOKEN_ADDRESS"),
            ("bulk_sender_address", "BULK_SENDER_ADDRESS"),
        ):
            if overrides.get(field) is None:
                values[field] = get_required_env(env_key)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(values)


__all__ = [
    "BatchResult",
    "DispatchConfig",
    "DispatchSummary",
    "VerificationSample",
]
