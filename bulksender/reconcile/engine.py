"""Offline reconciliation of balance snapshots against expected transfers.

Every function here is pure: results depend only on the mappings passed in.
Addresses are expected to be normalized (lowercase) in all mappings.
"""

from collections.abc import Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal

from bulksender.reconcile.models import (
    BalanceResult,
    ReconciliationSummary,
    VerificationResult,
)


def reconcile(
    start_balances: Mapping[str, int],
    end_balances: Mapping[str, int],
    expected: Mapping[str, int],
) -> list[VerificationResult]:
    """Check ``end == start + expected`` for every expected recipient.

    Results follow the order of ``expected``. Addresses missing from a
    snapshot count as a zero balance on that side. Addresses present only in
    the snapshots are ignored.

    Example:
        >>> [r.matches for r in reconcile({"0xa": 100}, {"0xa": 150}, {"0xa": 50})]
        [True]
    """
    results = []
    for address, amount in expected.items():
        start = start_balances.get(address, 0)
        end = end_balances.get(address, 0)
        calculated_end = start + amount
        matches = end == calculated_end
        results.append(
            VerificationResult(
                address=address,
                start_balance=start,
                expected_amount=amount,
                end_balance=end,
                calculated_end=calculated_end,
                matches=matches,
                difference=None if matches else end - calculated_end,
            )
        )
    return results


def compare_balances(
    expected: Mapping[str, int], actual: Mapping[str, int]
) -> list[BalanceResult]:
    """Check current balances equal the expected amounts (no start snapshot)."""
    results = []
    for address, amount in expected.items():
        balance = actual.get(address, 0)
        matches = balance == amount
        results.append(
            BalanceResult(
                address=address,
                expected_amount=amount,
                actual_balance=balance,
                matches=matches,
                difference=None if matches else balance - amount,
            )
        )
    return results


def success_rate(matches: int, total: int) -> Decimal:
    """Percentage of matches, rounded half-up to two places. 0.00 when empty."""
    if total == 0:
        return Decimal("0.00")
    rate = Decimal(matches) * 100 / Decimal(total)
    return rate.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _summarize(
    results: Sequence[VerificationResult | BalanceResult],
) -> ReconciliationSummary:
    mismatched = [result for result in results if not result.matches]
    matches = len(results) - len(mismatched)
    return ReconciliationSummary(
        total=len(results),
        matches=matches,
        mismatches=len(mismatched),
        success_rate=success_rate(matches, len(results)),
        total_discrepancy=sum(result.difference or 0 for result in mismatched),
        mismatched=mismatched,
    )


def summarize(results: Sequence[VerificationResult]) -> ReconciliationSummary:
    """Aggregate reconciliation results."""
    return _summarize(results)


def summarize_balances(results: Sequence[BalanceResult]) -> ReconciliationSummary:
    """Aggregate live balance comparison results."""
    return _summarize(results)


__all__ = [
    "compare_balances",
    "reconcile",
    "success_rate",
    "summarize",
    "summarize_balances",
]
