"""Sampled balance verification around a batch transfer.

Initial balances of a few recipients are recorded before the batch is
submitted and compared after it confirms. This catches tokens whose transfers
do not credit the full amount (fee-on-transfer, rebasing) while keeping the
read cost per batch bounded. Exhaustive checking is left to the offline
reconciliation.
"""

import asyncio
import logging
import random
from collections.abc import Sequence

from bulksender.contracts.interfaces import BalanceReader, IndexChooser
from bulksender.dispatch.models import VerificationSample
from bulksender.errors import VerificationMismatch
from bulksender.helpers.constants import (
    MAX_SAMPLES_PER_BATCH,
    MIN_SAMPLES_PER_BATCH,
    SAMPLE_RATIO_DENOMINATOR,
)
from bulksender.helpers.logging import get_logger
from bulksender.ledger.models import Batch, TransferEntry


def sample_size(batch_length: int) -> int:
    """Number of recipients to verify for a batch of ``batch_length``.

    10% of the batch rounded up, clamped to [1, 10] and never more than the
    batch itself.

    Example:
        >>> [sample_size(n) for n in (1, 9, 11, 200)]
        [1, 1, 2, 10]
    """
    if batch_length <= 0:
        msg = f"Batch length must be positive, got {batch_length}"
        raise ValueError(msg)

    size = -(-batch_length // SAMPLE_RATIO_DENOMINATOR)
    size = max(MIN_SAMPLES_PER_BATCH, min(size, MAX_SAMPLES_PER_BATCH))
    return min(size, batch_length)


class RandomIndexChooser:
    """Uniform sampling without replacement backed by :mod:`random`."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.SystemRandom()

    def sample(self, population: int, k: int) -> list[int]:
        return self.rng.sample(range(population), k)


class SamplingVerifier:
    """Two-phase balance check for the recipients of one batch."""

    def __init__(
        self,
        reader: BalanceReader,
        chooser: IndexChooser | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.reader = reader
        self.chooser = chooser or RandomIndexChooser()
        self.logger = logger or get_logger("bulksender.sampling")

    def choose_indices(self, batch_length: int) -> list[int]:
        """Pick distinct indices into a batch.

        Raises:
            ValueError: If the chooser returns a wrong count, a duplicate or
                an out-of-range index
        """
        k = sample_size(batch_length)
        indices = list(self.chooser.sample(batch_length, k))

        if len(indices) != k:
            msg = f"Index chooser returned {len(indices)} indices, expected {k}"
            raise ValueError(msg)
        if len(set(indices)) != len(indices):
            msg = f"Index chooser returned duplicate indices: {indices}"
            raise ValueError(msg)
        out_of_range = [i for i in indices if not 0 <= i < batch_length]
        if out_of_range:
            msg = f"Index chooser returned out-of-range indices: {out_of_range}"
            raise ValueError(msg)
        return indices

    async def _read_balances(self, addresses: Sequence[str]) -> list[int]:
        return list(
            await asyncio.gather(*(self.reader.balance_of(a) for a in addresses))
        )

    async def prepare(self, batch: Batch) -> list[VerificationSample]:
        """Record initial balances of the sampled recipients.

        Must run before the batch transaction is submitted. Chosen indices
        are deduplicated by address, so a batch listing a recipient more than
        once can yield fewer than ``sample_size(len(batch))`` samples.
        """
        # A recipient listed twice in one batch receives both amounts.
        totals: dict[str, int] = {}
        for entry in batch.entries:
            totals[entry.address] = totals.get(entry.address, 0) + entry.amount

        chosen: dict[str, TransferEntry] = {}
        for i in self.choose_indices(len(batch)):
            chosen.setdefault(batch.entries[i].address, batch.entries[i])
        entries = list(chosen.values())
        balances = await self._read_balances([e.raw_address for e in entries])

        samples = [
            VerificationSample(
                address=entry.raw_address,
                expected_amount=totals[entry.address],
                initial_balance=balance,
            )
            for entry, balance in zip(entries, balances, strict=True)
        ]
        self.logger.info(
            f"Sampling {len(samples)} of {len(batch)} recipients in batch {batch.index + 1}"
        )
        return samples

    async def verify(self, samples: Sequence[VerificationSample]) -> int:
        """Compare current balances against the recorded samples.

        Returns:
            Number of verified samples

        Raises:
            VerificationMismatch: On the first sample whose delta differs
        """
        balances = await self._read_balances([s.address for s in samples])

        for sample, current in zip(samples, balances, strict=True):
            delta = current - sample.initial_balance
            if delta != sample.expected_amount:
                self.logger.error(
                    f"Verification failed for {sample.address}: "
                    f"expected +{sample.expected_amount}, got {delta:+d}"
                )
                raise VerificationMismatch(sample.address, sample.expected_amount, delta)
            self.logger.debug(f"Verified {sample.address}: +{delta}")

        self.logger.info(f"Verified {len(samples)} sampled transfers")
        return len(samples)


__all__ = [
    "RandomIndexChooser",
    "SamplingVerifier",
    "sample_size",
]
