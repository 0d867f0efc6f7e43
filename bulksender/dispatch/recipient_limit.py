"""Read or update the recipient limit of a BulkSender contract.

Usage:
    python -m bulksender.dispatch.recipient_limit            # print the limit
    python -m bulksender.dispatch.recipient_limit --set 500  # owner only
"""

import sys
from argparse import ArgumentParser
from asyncio import run
from collections.abc import Sequence

import httpx
from rich.console import Console

from bulksender.contracts.bulk_sender import BulkSender
from bulksender.contracts.signer import TransactionSender
from bulksender.dispatch.confirmation import confirm_transaction
from bulksender.errors import BulkSenderError
from bulksender.helpers.config import get_eth_rpc_url, get_optional_env, get_required_env
from bulksender.helpers.http import create_http_client
from bulksender.helpers.logging import get_logger
from bulksender.helpers.rpc import RPCClient, RPCError


async def main(
    rpc_url: str,
    private_key: str,
    contract_address: str,
    new_limit: int | None = None,
    log_level: str = "INFO",
) -> int:
    logger = get_logger("bulksender.recipient_limit", log_level=log_level, log_color=True)
    console = Console()

    rpc = RPCClient(rpc_url)
    async with create_http_client() as client:
        sender = TransactionSender(rpc, client, private_key, logger=logger)
        contract = BulkSender(contract_address, rpc, client, sender)

        try:
            current = await contract.get_recipient_limit()
            console.print(f"[cyan]Current recipient limit: {current}[/cyan]")

            if new_limit is None:
                return 0

            logger.info(f"Setting recipient limit to {new_limit}...")
            tx_hash = await contract.set_recipient_limit(new_limit)
            await confirm_transaction(sender, tx_hash, logger)
            updated = await contract.get_recipient_limit()
        except (BulkSenderError, RPCError, httpx.HTTPError) as e:
            logger.error(f"Recipient limit update failed: {e}")
            console.print(f"[bold red]✗ {e}[/bold red]")
            return 1

    console.print(f"[bold green]✓ New recipient limit: {updated}[/bold green]")
    return 0


def cli(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(description="Read or set the BulkSender recipient limit")
    parser.add_argument(
        "--contract",
        help="BulkSender contract address (default: $BULK_SENDER_ADDRESS)",
    )
    parser.add_argument("--set", dest="new_limit", type=int, help="New limit (owner only)")
    parser.add_argument("--rpc-url", help="JSON-RPC endpoint (default: $ETH_RPC_URL)")
    parser.add_argument("--log-level", default=get_optional_env("LOG_LEVEL", "INFO"))
    args = parser.parse_args(argv)

    if args.new_limit is not None and args.new_limit <= 0:
        parser.error("--set must be a positive integer")

    try:
        rpc_url = get_eth_rpc_url(args.rpc_url)
        private_key = get_required_env("PRIVATE_KEY")
        contract_address = args.contract or get_required_env("BULK_SENDER_ADDRESS")
    except ValueError as e:
        Console().print(f"[bold red]✗ Configuration error: {e}[/bold red]")
        return 1

    return run(
        main(rpc_url, private_key, contract_address, args.new_limit, args.log_level)
    )


if __name__ == "__main__":
    sys.exit(cli())
