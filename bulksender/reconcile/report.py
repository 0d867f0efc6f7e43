"""Rich console reports for reconciliation and balance verification."""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from bulksender.helpers.constants import REPORT_MATCH_LIMIT, REPORT_MISMATCH_LIMIT
from bulksender.helpers.parsers import format_units
from bulksender.reconcile.models import (
    BalanceResult,
    ReconciliationSummary,
    VerificationResult,
)


def _print_counts(console: Console, title: str, summary: ReconciliationSummary) -> None:
    console.print(f"\n[bold]{title}[/bold]")
    console.print(f"  Total addresses verified: {summary.total:,}")
    console.print(f"  [green]Matching: {summary.matches:,}[/green]")
    console.print(f"  [red]Mismatched: {summary.mismatches:,}[/red]")
    console.print(f"  Success rate: {summary.success_rate}%")


def _print_overflow(console: Console, shown: int, total: int) -> None:
    if total > shown:
        console.print(f"[dim]... and {total - shown:,} more mismatches[/dim]")


def print_transfer_report(
    console: Console,
    results: Sequence[VerificationResult],
    summary: ReconciliationSummary,
    *,
    mismatch_limit: int = REPORT_MISMATCH_LIMIT,
    match_limit: int = REPORT_MATCH_LIMIT,
) -> None:
    """Print the reconciliation report.

    Shows the counts, the first ``mismatch_limit`` mismatches, the first
    ``match_limit`` matches and the total discrepancy. Amounts are raw base
    units.
    """
    _print_counts(console, "Transfer Verification Report", summary)

    mismatches = [r for r in results if not r.matches]
    if mismatches:
        table = Table(title="Mismatched Transfers")
        table.add_column("Address", style="cyan")
        table.add_column("Start Balance", justify="right")
        table.add_column("Expected Amount", justify="right")
        table.add_column("End Balance", justify="right")
        table.add_column("Calculated End", justify="right")
        table.add_column("Difference", justify="right", style="red")
        for result in mismatches[:mismatch_limit]:
            table.add_row(
                result.address,
                str(result.start_balance),
                str(result.expected_amount),
                str(result.end_balance),
                str(result.calculated_end),
                str(result.difference or 0),
            )
        console.print(table)
        _print_overflow(console, mismatch_limit, len(mismatches))

    matches = [r for r in results if r.matches]
    if matches:
        table = Table(title="Sample Successful Transfers")
        table.add_column("Address", style="cyan")
        table.add_column("Start Balance", justify="right")
        table.add_column("Expected Amount", justify="right")
        table.add_column("End Balance", justify="right", style="green")
        for result in matches[:match_limit]:
            table.add_row(
                result.address,
                str(result.start_balance),
                str(result.expected_amount),
                str(result.end_balance),
            )
        console.print(table)

    console.print("\n[bold]Summary:[/bold]")
    if summary.mismatches == 0:
        console.print("[bold green]✓ All transfers verified successfully[/bold green]")
        console.print("Formula: start_balance + expected_amount = end_balance ✓")
    else:
        console.print(
            f"[yellow]⚠ {summary.mismatches:,} transfers have discrepancies[/yellow]"
        )
        console.print("Formula: start_balance + expected_amount ≠ end_balance")
        console.print(f"Total discrepancy: {summary.total_discrepancy} wei")


def print_balance_report(
    console: Console,
    results: Sequence[BalanceResult],
    summary: ReconciliationSummary,
    decimals: int,
    symbol: str,
    *,
    mismatch_limit: int = REPORT_MISMATCH_LIMIT,
) -> None:
    """Print the live balance verification report in token units."""
    _print_counts(console, f"Balance Verification Report ({symbol})", summary)

    mismatches = [r for r in results if not r.matches]
    if mismatches:
        table = Table(title="Mismatched Balances")
        table.add_column("Address", style="cyan")
        table.add_column("Expected", justify="right")
        table.add_column("Actual", justify="right")
        table.add_column("Difference", justify="right", style="red")
        for result in mismatches[:mismatch_limit]:
            table.add_row(
                result.address,
                format_units(result.expected_amount, decimals),
                format_units(result.actual_balance, decimals),
                format_units(result.difference or 0, decimals),
            )
        console.print(table)
        _print_overflow(console, mismatch_limit, len(mismatches))

    console.print("\n[bold]Summary:[/bold]")
    if summary.mismatches == 0:
        console.print("[bold green]✓ All balances match[/bold green]")
    else:
        console.print(
            f"[yellow]⚠ {summary.mismatches:,} addresses have balance mismatches[/yellow]"
        )


__all__ = [
    "print_balance_report",
    "print_transfer_report",
]
