"""Split transfer lists into bounded, order-preserving batches."""

from collections.abc import Sequence

from typing import TypeVar

from bulksender.ledger.models import Batch, TransferEntry


T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split a sequence into consecutive lists of at most ``size`` items.

    Raises:
        ValueError: If size is not positive

    Example:
        >>> chunk([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    if size <= 0:
        msg = f"Batch size must be positive, got {size}"
        raise ValueError(msg)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def create_batches(entries: Sequence[TransferEntry], batch_size: int) -> list[Batch]:
    """Partition transfer entries into contiguous batches.

    Every batch holds ``batch_size`` entries except possibly the last one.
    Concatenating the batches reproduces ``entries`` exactly.

    Args:
        entries: Transfer entries in distribution order
        batch_size: Maximum recipients per batch

    Returns:
        Batches indexed from 0

    Raises:
        ValueError: If batch_size is not positive
    """
    return [
        Batch(index=index, entries=tuple(group))
        for index, group in enumerate(chunk(entries, batch_size))
    ]


__all__ = [
    "chunk",
    "create_batches",
]
