"""Reconcile start and end balance snapshots against the recipient list.

Usage:
    python -m bulksender.reconcile.verify_end_result \
        --start data/start_balances.csv --end data/end.csv \
        --recipients data/recipients.csv

Start snapshots have no header; end snapshots (as written by
``bulksender.balances.read_balances``) do. Mismatches are reported, not
treated as errors: the command exits 0 once the report has been written.
"""

import sys
from argparse import ArgumentParser, BooleanOptionalAction
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from bulksender.errors import BulkSenderError
from bulksender.helpers.config import get_optional_env
from bulksender.helpers.logging import get_logger
from bulksender.helpers.output import write_json_report
from bulksender.ledger.loader import load_balance_snapshot, load_expected_transfers
from bulksender.reconcile.engine import reconcile, summarize
from bulksender.reconcile.report import print_transfer_report


DEFAULT_OUTPUT = "data/transfer_verification_results.json"


def main(
    start_path: Path,
    end_path: Path,
    recipients_path: Path,
    output_path: Path,
    *,
    start_has_header: bool = False,
    end_has_header: bool = True,
    log_level: str = "INFO",
) -> int:
    logger = get_logger("bulksender.verify_end_result", log_level=log_level)
    console = Console()

    console.print("[cyan]Loading CSV files...[/cyan]")
    console.print(f"  Start balances: {start_path}")
    console.print(f"  End balances: {end_path}")
    console.print(f"  Recipients: {recipients_path}\n")

    try:
        start = load_balance_snapshot(start_path, has_header=start_has_header)
        end = load_balance_snapshot(end_path, has_header=end_has_header)
        expected = load_expected_transfers(recipients_path)
    except (BulkSenderError, FileNotFoundError) as e:
        logger.error(f"Error loading snapshots: {e}")
        console.print(f"[bold red]✗ {e}[/bold red]")
        return 1

    logger.info(f"Loaded {len(start)} start balances")
    logger.info(f"Loaded {len(end)} end balances")
    logger.info(f"Loaded {len(expected)} recipient entries")

    results = reconcile(start, end, expected)
    summary = summarize(results)
    print_transfer_report(console, results, summary)

    path = write_json_report(output_path, results)
    console.print(f"\n[dim]Detailed results saved to: {path}[/dim]")
    return 0


def cli(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(description="Verify start + expected = end for every recipient")
    parser.add_argument("--start", required=True, type=Path, help="Start balance CSV")
    parser.add_argument("--end", required=True, type=Path, help="End balance CSV")
    parser.add_argument(
        "--recipients",
        type=Path,
        default=Path(get_optional_env("CSV_FILE", "data/recipients.csv")),
        help="Recipient CSV (default: $CSV_FILE or data/recipients.csv)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"JSON results file (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--start-header",
        action=BooleanOptionalAction,
        default=False,
        help="Start CSV has a header row (default: no)",
    )
    parser.add_argument(
        "--end-header",
        action=BooleanOptionalAction,
        default=True,
        help="End CSV has a header row (default: yes)",
    )
    parser.add_argument("--log-level", default=get_optional_env("LOG_LEVEL", "INFO"))
    args = parser.parse_args(argv)

    return main(
        args.start,
        args.end,
        args.recipients,
        args.output,
        start_has_header=args.start_header,
        end_has_header=args.end_header,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    sys.exit(cli())
