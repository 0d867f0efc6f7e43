"""Pydantic models for reconciliation and balance verification results."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from bulksender.helpers.models import BigInt


class VerificationResult(BaseModel):
    """Expected versus observed end balance of one recipient."""

    address: str
    start_balance: BigInt = Field(..., alias="startBalance")
    expected_amount: BigInt = Field(..., alias="expectedAmount")
    end_balance: BigInt = Field(..., alias="endBalance")
    calculated_end: BigInt = Field(..., alias="calculatedEnd")
    matches: bool
    difference: BigInt | None = Field(
        default=None, description="end - calculated end, absent when matching"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class BalanceResult(BaseModel):
    """Current on-chain balance of one recipient against its expected amount."""

    address: str
    expected_amount: BigInt = Field(..., alias="expectedAmount")
    actual_balance: BigInt = Field(..., alias="actualBalance")
    matches: bool
    difference: BigInt | None = Field(
        default=None, description="actual - expected, absent when matching"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ReconciliationSummary(BaseModel):
    """Aggregate counts over a list of results."""

    total: int
    matches: int
    mismatches: int
    success_rate: Decimal = Field(..., description="Percentage, two decimal places")
    total_discrepancy: int = Field(..., description="Sum of signed differences")
    mismatched: list[VerificationResult | BalanceResult] = Field(default_factory=list)


__all__ = [
    "BalanceResult",
    "ReconciliationSummary",
    "VerificationResult",
]
