"""Read current token balances of every recipient into a CSV snapshot.

Usage:
    python -m bulksender.balances.read_balances --csv data/recipients.csv

The output (``address,current_balance`` with a header, raw base units) is the
"end" snapshot consumed by ``bulksender.reconcile.verify_end_result``.
"""

import asyncio
import sys
from argparse import ArgumentParser
from collections.abc import Sequence
from pathlib import Path

import httpx
from rich.console import Console

from bulksender.contracts.erc20 import ERC20Token
from bulksender.contracts.interfaces import BalanceReader
from bulksender.errors import BulkSenderError
from bulksender.helpers.config import get_eth_rpc_url, get_optional_env, get_required_env
from bulksender.helpers.constants import BALANCE_READ_BATCH_SIZE
from bulksender.helpers.http import create_http_client, retry_with_backoff
from bulksender.helpers.logging import get_logger
from bulksender.helpers.output import write_balance_csv
from bulksender.helpers.progress import track_batches, track_progress
from bulksender.helpers.rpc import RPCClient, RPCError
from bulksender.ledger.loader import load_transfer_entries
from bulksender.ledger.partition import chunk


DEFAULT_OUTPUT = "data/current_balances.csv"


@retry_with_backoff()
async def read_balance(reader: BalanceReader, address: str) -> int:
    """Balance of one address, retried on transport and RPC errors."""
    return await reader.balance_of(address)


async def read_balances(
    reader: BalanceReader,
    addresses: Sequence[str],
    *,
    chunk_size: int = BALANCE_READ_BATCH_SIZE,
    console: Console | None = None,
) -> list[tuple[str, int]]:
    """Read balances chunk by chunk, concurrently within a chunk.

    Returns:
        ``(address, balance)`` pairs in input order

    Raises:
        RPCError: If a read still fails after retries
        httpx.HTTPError: If a read still fails after retries
    """
    chunks = chunk(list(addresses), chunk_size)
    results: list[tuple[str, int]] = []

    with track_progress("Reading balances", total=len(addresses), console=console) as (
        progress,
        task,
    ):
        for batch_num, addresses_chunk in enumerate(chunks, start=1):
            balances = await asyncio.gather(
                *(read_balance(reader, address) for address in addresses_chunk)
            )
            results.extend(zip(addresses_chunk, balances, strict=True))
            track_batches(
                progress, task, batch_num, len(chunks), len(addresses_chunk), "Reading balances"
            )

    return results


async def main(
    rpc_url: str,
    token_address: str,
    csv_path: Path,
    output_path: Path,
    *,
    chunk_size: int = BALANCE_READ_BATCH_SIZE,
    log_level: str = "INFO",
) -> int:
    logger = get_logger("bulksender.read_balances", log_level=log_level)
    console = Console()

    try:
        entries = load_transfer_entries(csv_path)
    except (BulkSenderError, FileNotFoundError) as e:
        logger.error(f"Error loading recipients: {e}")
        console.print(f"[bold red]✗ {e}[/bold red]")
        return 1
    logger.info(f"Loaded {len(entries)} entries from CSV")

    rpc = RPCClient(rpc_url)
    async with create_http_client() as client:
        token = ERC20Token(token_address, rpc, client)
        symbol = await token.symbol()
        decimals = await token.decimals()
        console.print(f"[cyan]Token: {symbol} ({decimals} decimals) at {token_address}[/cyan]")
        console.print(
            f"[cyan]Reading balances for {len(entries):,} addresses "
            f"in batches of {chunk_size}[/cyan]\n"
        )

        try:
            balances = await read_balances(
                token,
                [entry.raw_address for entry in entries],
                chunk_size=chunk_size,
                console=console,
            )
        except (RPCError, httpx.HTTPError) as e:
            logger.error(f"Error reading balances: {e}")
            console.print(f"[bold red]✗ {e}[/bold red]")
            return 1

    path = write_balance_csv(output_path, balances)
    console.print(f"\n[bold green]✓ Read {len(balances):,} balances[/bold green]")
    console.print(f"[dim]Output saved to: {path}[/dim]")
    return 0


def cli(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(description="Write current token balances of all recipients to CSV")
    parser.add_argument(
        "--csv",
        type=Path,
        default=Path(get_optional_env("CSV_FILE", "data/recipients.csv")),
        help="Recipient CSV (default: $CSV_FILE or data/recipients.csv)",
    )
    parser.add_argument("--token", help="Token address (default: $TOKEN_ADDRESS)")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Balance CSV to write (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BALANCE_READ_BATCH_SIZE,
        help=f"Concurrent reads per batch (default: {BALANCE_READ_BATCH_SIZE})",
    )
    parser.add_argument("--rpc-url", help="JSON-RPC endpoint (default: $ETH_RPC_URL)")
    parser.add_argument("--log-level", default=get_optional_env("LOG_LEVEL", "INFO"))
    args = parser.parse_args(argv)

    if args.batch_size <= 0:
        parser.error("--batch-size must be a positive integer")

    try:
        rpc_url = get_eth_rpc_url(args.rpc_url)
        token_address = args.token or get_required_env("TOKEN_ADDRESS")
    except ValueError as e:
        Console().print(f"[bold red]✗ Configuration error: {e}[/bold red]")
        return 1

    return asyncio.run(
        main(
            rpc_url,
            token_address,
            args.csv,
            args.output,
            chunk_size=args.batch_size,
            log_level=args.log_level,
        )
    )


if __name__ == "__main__":
    sys.exit(cli())
