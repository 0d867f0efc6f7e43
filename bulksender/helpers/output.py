"""Report and snapshot writers."""

import csv
import json
from collections.abc import Iterable, Sequence
from pathlib import Path

from typing import Any

from pydantic import BaseModel


BALANCE_CSV_HEADER = ("address", "current_balance")


def write_json_report(path: str | Path, records: Sequence[BaseModel] | BaseModel) -> Path:
    """Serialize pydantic records to an indented JSON file.

    Existing files are overwritten. Big integer fields are expected to carry a
    JSON serializer that renders them as decimal strings.

    Args:
        path: Destination file
        records: A single model or a sequence of models

    Returns:
        Path of the written file
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    payload: Any
    if isinstance(records, BaseModel):
        payload = records.model_dump(mode="json", by_alias=True)
    else:
        payload = [record.model_dump(mode="json", by_alias=True) for record in records]

    with open(output_path, "w") as f:
        json.dump(payload, f, indent=2)
        f.write("\n")
    return output_path


def write_balance_csv(
    path: str | Path,
    balances: Iterable[tuple[str, int]],
    header: tuple[str, str] = BALANCE_CSV_HEADER,
) -> Path:
    """Write an ``address,balance`` snapshot with a header row.

    Balances are written as raw decimal integers (no unit formatting).
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for address, balance in balances:
            writer.writerow((address, str(balance)))
    return output_path


__all__ = [
    "BALANCE_CSV_HEADER",
    "write_balance_csv",
    "write_json_report",
]
