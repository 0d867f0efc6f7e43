"""Compare live token balances of every recipient to the expected amounts.

Usage:
    python -m bulksender.balances.verify_balances --csv data/recipients.csv

Meant for fresh recipient addresses, where the balance after a distribution
should equal the amount sent. Use ``verify_end_result`` when recipients held
tokens beforehand.
"""

import asyncio
import sys
from argparse import ArgumentParser
from collections.abc import Sequence
from pathlib import Path

import httpx
from rich.console import Console

from bulksender.balances.read_balances import read_balances
from bulksender.contracts.erc20 import ERC20Token
from bulksender.errors import BulkSenderError
from bulksender.helpers.config import get_eth_rpc_url, get_optional_env, get_required_env
from bulksender.helpers.constants import BALANCE_READ_BATCH_SIZE
from bulksender.helpers.http import create_http_client
from bulksender.helpers.logging import get_logger
from bulksender.helpers.output import write_json_report
from bulksender.helpers.rpc import RPCClient, RPCError
from bulksender.ledger.loader import load_expected_transfers
from bulksender.reconcile.engine import compare_balances, summarize_balances
from bulksender.reconcile.report import print_balance_report


DEFAULT_OUTPUT = "data/balance_verification_results.json"


async def main(
    rpc_url: str,
    token_address: str,
    csv_path: Path,
    output_path: Path,
    *,
    chunk_size: int = BALANCE_READ_BATCH_SIZE,
    log_level: str = "INFO",
) -> int:
    logger = get_logger("bulksender.verify_balances", log_level=log_level)
    console = Console()

    try:
        expected = load_expected_transfers(csv_path)
    except (BulkSenderError, FileNotFoundError) as e:
        logger.error(f"Error loading recipients: {e}")
        console.print(f"[bold red]✗ {e}[/bold red]")
        return 1
    logger.info(f"Loaded {len(expected)} recipients from CSV")

    rpc = RPCClient(rpc_url)
    async with create_http_client() as client:
        token = ERC20Token(token_address, rpc, client)
        try:
            balances = await read_balances(
                token, list(expected), chunk_size=chunk_size, console=console
            )
        except (RPCError, httpx.HTTPError) as e:
            logger.error(f"Error reading balances: {e}")
            console.print(f"[bold red]✗ {e}[/bold red]")
            return 1
        decimals = await token.decimals()
        symbol = await token.symbol()

    results = compare_balances(expected, dict(balances))
    summary = summarize_balances(results)
    print_balance_report(console, results, summary, decimals, symbol)

    path = write_json_report(output_path, results)
    console.print(f"\n[dim]Detailed results saved to: {path}[/dim]")
    return 0


def cli(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(description="Check recipient balances equal their expected amounts")
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
        help=f"JSON results file (default: {DEFAULT_OUTPUT})",
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
