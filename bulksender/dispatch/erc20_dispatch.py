"""Distribute ERC20 tokens from a recipient CSV through the BulkSender contract.

Usage:
    python -m bulksender.dispatch.erc20_dispatch --csv data/recipients.csv

Addresses, batch size and the CSV path default to the environment
(``TOKEN_ADDRESS``, ``BULK_SENDER_ADDRESS``, ``BATCH_SIZE``, ``CSV_FILE``).
"""

import sys
from argparse import ArgumentParser, Namespace
from asyncio import run
from collections.abc import Sequence

import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from bulksender.contracts.bulk_sender import BulkSender
from bulksender.contracts.erc20 import ERC20Token
from bulksender.contracts.signer import TransactionSender
from bulksender.dispatch.driver import BatchTransferDriver
from bulksender.dispatch.guard import AllowanceGuard
from bulksender.dispatch.models import DispatchConfig, DispatchSummary
from bulksender.dispatch.runner import DispatchRun
from bulksender.dispatch.sampling import SamplingVerifier
from bulksender.errors import BatchFailed, BulkSenderError
from bulksender.helpers.config import get_eth_rpc_url, get_optional_env, get_required_env
from bulksender.helpers.http import create_http_client
from bulksender.helpers.logging import get_logger
from bulksender.helpers.output import write_json_report
from bulksender.helpers.parsers import format_amount
from bulksender.helpers.rpc import RPCClient, RPCError
from bulksender.ledger.loader import load_transfer_entries, log_transfer_preview


def display_summary(console: Console, summary: DispatchSummary) -> None:
    """Print one row per confirmed batch and the run totals."""
    table = Table(title="Bulk Transfer Results")
    table.add_column("Batch", justify="right", style="cyan")
    table.add_column("Recipients", justify="right")
    table.add_column("Amount", justify="right", style="green")
    table.add_column("Transaction", style="magenta")
    table.add_column("Block", justify="right")
    table.add_column("Verified", justify="right", style="yellow")

    for result in summary.batches:
        table.add_row(
            f"{result.index + 1}/{summary.batch_count}",
            f"{result.recipient_count:,}",
            format_amount(result.total_amount, separators=True),
            result.tx_hash,
            str(result.block_number),
            str(result.samples_verified),
        )

    console.print("\n")
    console.print(table)
    console.print("\n[bold]Summary:[/bold]")
    console.print(f"  Recipients: {summary.recipient_count:,}")
    console.print(f"  Batches: {summary.batch_count}")
    console.print(f"  Total amount: {format_amount(summary.total_amount, separators=True)}")


async def main(config: DispatchConfig, rpc_url: str, private_key: str, log_level: str) -> int:
    """Run a distribution.

    Returns:
        Process exit code, 0 on success and 1 on any fatal error
    """
    logger = get_logger("bulksender.dispatch", log_level=log_level, log_color=True)
    console = Console()

    try:
        entries = load_transfer_entries(config.csv_file)
    except (BulkSenderError, FileNotFoundError) as e:
        logger.error(f"Error loading transfer list: {e}")
        console.print(f"[bold red]✗ {e}[/bold red]")
        return 1
    if not entries:
        logger.error(f"No transfer entries found in {config.csv_file}")
        return 1
    log_transfer_preview(entries, logger)

    rpc = RPCClient(rpc_url)
    async with create_http_client() as client:
        sender = TransactionSender(
            rpc,
            client,
            private_key,
            confirmation_timeout=config.confirmation_timeout,
            logger=logger,
        )
        token = ERC20Token(config.token_address, rpc, client, sender)
        contract = BulkSender(config.bulk_sender_address, rpc, client, sender)

        console.print(f"[cyan]Sender: {sender.address}[/cyan]")
        console.print(f"[cyan]Token: {config.token_address}[/cyan]")
        console.print(f"[cyan]BulkSender: {config.bulk_sender_address}[/cyan]")
        console.print(f"[cyan]Batch size: {config.batch_size}[/cyan]\n")

        dispatch = DispatchRun(
            config.token_address,
            contract,
            AllowanceGuard(token, sender, sender.address, contract.address, logger),
            BatchTransferDriver(
                config.token_address,
                contract,
                sender,
                SamplingVerifier(token, logger=logger),
                logger,
                value=config.value,
            ),
            config.batch_size,
            logger,
        )

        try:
            summary = await dispatch.run(entries)
        except BatchFailed as e:
            logger.error(f"Transfer failed: {e}")
            console.print(
                f"\n[bold red]✗ Batch {e.batch_index + 1}/{e.batch_count} failed[/bold red]"
            )
            console.print(f"[yellow]{len(e.completed)} batch(es) were already confirmed[/yellow]")
            for result in e.completed:
                console.print(f"  [dim]{result.index + 1}: {result.tx_hash}[/dim]")
            return 1
        except (BulkSenderError, RPCError, httpx.HTTPError) as e:
            logger.error(f"Transfer failed: {e}")
            console.print(f"\n[bold red]✗ {e}[/bold red]")
            return 1

    display_summary(console, summary)
    if config.output is not None:
        path = write_json_report(config.output, summary)
        console.print(f"[dim]Results saved to: {path}[/dim]")
    console.print("\n[bold green]✓ Bulk transfer complete[/bold green]")
    return 0


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Send ERC20 tokens to many recipients in batches")
    parser.add_argument("--csv", dest="csv_file", help="Recipient CSV (default: $CSV_FILE)")
    parser.add_argument("--token", dest="token_address", help="Token address (default: $TOKEN_ADDRESS)")
    parser.add_argument(
        "--bulk-sender",
        dest="bulk_sender_address",
        help="BulkSender contract address (default: $BULK_SENDER_ADDRESS)",
    )
    parser.add_argument("--batch-size", type=int, help="Recipients per transaction (default: $BATCH_SIZE or 200)")
    parser.add_argument("--value", type=int, help="Wei attached to each bulk send (default: 0)")
    parser.add_argument(
        "--confirmation-timeout",
        type=float,
        help="Seconds to wait for each receipt (default: $CONFIRMATION_TIMEOUT or 300)",
    )
    parser.add_argument("--output", help="Write a JSON summary of the run to this file")
    parser.add_argument("--rpc-url", help="JSON-RPC endpoint (default: $ETH_RPC_URL)")
    parser.add_argument("--log-level", default=get_optional_env("LOG_LEVEL", "INFO"))
    return parser


def load_config(args: Namespace) -> DispatchConfig:
    """Merge CLI flags over environment settings."""
    return DispatchConfig.from_env(
        token_address=args.token_address,
        bulk_sender_address=args.bulk_sender_address,
        csv_file=args.csv_file,
        batch_size=args.batch_size,
        value=args.value,
        confirmation_timeout=args.confirmation_timeout,
        output=args.output,
    )


def cli(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console()
    try:
        config = load_config(args)
        rpc_url = get_eth_rpc_url(args.rpc_url)
        private_key = get_required_env("PRIVATE_KEY")
    except (ValidationError, ValueError) as e:
        console.print(f"[bold red]✗ Configuration error: {e}[/bold red]")
        return 1
    return run(main(config, rpc_url, private_key, args.log_level))


if __name__ == "__main__":
    sys.exit(cli())
