"""Load transfer lists and balance snapshots from CSV files.

Transfer lists are ``address,amount`` rows without a header. Amounts may
carry thousands separators, quoted or not. Balance snapshots are
``address,balance`` rows, optionally preceded by a header line.

Loading is all-or-nothing: the first bad row raises and nothing is returned.
"""

import csv
import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from bulksender.errors import (
    IncompleteRow,
    InvalidAddress,
    MalformedAmount,
    NonPositiveAmount,
)
from bulksender.helpers.constants import PREVIEW_ENTRY_COUNT
from bulksender.helpers.parsers import is_address, normalize_address, parse_amount
from bulksender.ledger.models import TransferEntry


def _read_rows(path: str | Path, *, skip_header: bool = False) -> Iterator[list[str]]:
    """Yield stripped, non-blank CSV rows."""
    csv_path = Path(path)
    if not csv_path.exists():
        msg = f"CSV file not found at {csv_path}"
        raise FileNotFoundError(msg)

    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.reader(f)
        header_pending = skip_header
        for row in reader:
            cells = [cell.strip() for cell in row]
            if not any(cells):
                continue
            if header_pending:
                header_pending = False
                continue
            yield cells


def _split_row(cells: Sequence[str], row_number: int) -> tuple[str, str]:
    """Return (address, amount text) for a row.

    Unquoted thousands separators split the amount over several cells, so
    every cell after the address belongs to the amount.
    """
    address = cells[0] if cells else ""
    amount_text = ",".join(cells[1:]).strip(", ")
    if not address or not amount_text:
        raise IncompleteRow(row_number)
    return address, amount_text


def _parse_address(address: str, row_number: int) -> str:
    if not is_address(address):
        raise InvalidAddress(row_number, address)
    return address


def _parse_amount(amount_text: str, row_number: int) -> int:
    try:
        return parse_amount(amount_text)
    except ValueError:
        raise MalformedAmount(row_number, amount_text) from None


def parse_transfer_row(cells: Sequence[str], row_number: int) -> TransferEntry:
    """Validate one transfer-list row.

    Args:
        cells: CSV cells of the row
        row_number: 1-based row number used in error messages

    Returns:
        TransferEntry with a normalized key and the source casing preserved

    Raises:
        IncompleteRow: Address or amount missing
        InvalidAddress: Address is not 0x + 40 hex digits
        MalformedAmount: Amount is not a decimal integer
        NonPositiveAmount: Amount is zero
    """
    address, amount_text = _split_row(cells, row_number)
    address = _parse_address(address, row_number)
    amount = _parse_amount(amount_text, row_number)
    if amount <= 0:
        raise NonPositiveAmount(row_number, amount)
    return TransferEntry.from_address(address, amount)


def load_transfer_entries(path: str | Path) -> list[TransferEntry]:
    """Load a transfer list, failing on the first invalid row.

    Raises:
        FileNotFoundError: If the file does not exist
        LedgerError: On the first invalid row
    """
    return [
        parse_transfer_row(cells, row_number)
        for row_number, cells in enumerate(_read_rows(path), start=1)
    ]


def parse_balance_row(cells: Sequence[str], row_number: int) -> tuple[str, int]:
    """Validate one balance snapshot row. Zero balances are accepted."""
    address, amount_text = _split_row(cells, row_number)
    address = _parse_address(address, row_number)
    return normalize_address(address), _parse_amount(amount_text, row_number)


def load_balance_snapshot(
    path: str | Path, *, has_header: bool = False
) -> dict[str, int]:
    """Load an ``address -> balance`` snapshot keyed by lowercase address.

    If an address appears twice the last row wins.

    Args:
        path: CSV file path
        has_header: Skip the first non-blank line

    Raises:
        FileNotFoundError: If the file does not exist
        LedgerError: On the first invalid row
    """
    balances: dict[str, int] = {}
    for row_number, cells in enumerate(_read_rows(path, skip_header=has_header), start=1):
        address, balance = parse_balance_row(cells, row_number)
        balances[address] = balance
    return balances


def expected_transfers(entries: Iterable[TransferEntry]) -> dict[str, int]:
    """Total expected amount per recipient, in first-seen order.

    Duplicate rows for one address are summed since every row is sent.
    """
    expected: dict[str, int] = {}
    for entry in entries:
        expected[entry.address] = expected.get(entry.address, 0) + entry.amount
    return expected


def load_expected_transfers(path: str | Path) -> dict[str, int]:
    """Load a transfer list and aggregate it by recipient."""
    return expected_transfers(load_transfer_entries(path))


def log_transfer_preview(
    entries: Sequence[TransferEntry],
    logger: logging.Logger,
    count: int = PREVIEW_ENTRY_COUNT,
) -> None:
    """Log the entry count and the first few rows for a visual check."""
    logger.info(f"Loaded {len(entries)} entries from CSV")
    for position, entry in enumerate(entries[:count], start=1):
        logger.info(f"  {position}: {entry.raw_address} -> {entry.amount} wei")


__all__ = [
    "expected_transfers",
    "load_balance_snapshot",
    "load_expected_transfers",
    "load_transfer_entries",
    "log_transfer_preview",
    "parse_balance_row",
    "parse_transfer_row",
]
