"""In-memory doubles of the on-chain collaborators."""

import itertools

from eth_abi import encode

from bulksender.helpers.rpc import RPCError
from bulksender.helpers.rpc_models import TransactionReceipt
from bulksender.ledger.models import TransferEntry


OWNER = "0x" + "a" * 40
TOKEN = "0x" + "b" * 40
BULK_SENDER = "0x" + "c" * 40


def address(n: int) -> str:
    """Deterministic recipient address for index ``n``."""
    return f"0x{n + 1:040x}"


def make_entries(count: int, amount: int = 100) -> list[TransferEntry]:
    """``count`` distinct recipients each receiving ``amount``."""
    return [TransferEntry.from_address(address(i), amount) for i in range(count)]


class FakeChain:
    """Mints transaction hashes and serves their receipts."""

    def __init__(self) -> None:
        self.receipts: dict[str, TransactionReceipt] = {}
        self.waited: list[str] = []
        self._counter = itertools.count(1)

    def record(self, *, status: int = 1, gas_used: int = 50_000) -> str:
        n = next(self._counter)
        tx_hash = f"0x{n:064x}"
        self.receipts[tx_hash] = TransactionReceipt(
            transaction_hash=tx_hash,
            block_number=100 + n,
            status=status,
            gas_used=gas_used,
        )
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt:
        self.waited.append(tx_hash)
        return self.receipts[tx_hash]


class FakeToken:
    """ERC20 double keeping balances and allowances in dicts.

    ``fee`` is withheld from every credited transfer to model
    fee-on-transfer tokens. With ``ignore_approve`` approvals confirm but do
    not change the allowance.
    """

    def __init__(
        self,
        chain: FakeChain,
        owner: str = OWNER,
        *,
        balance: int = 0,
        allowance: int = 0,
        fee: int = 0,
        ignore_approve: bool = False,
        approve_status: int = 1,
    ) -> None:
        self.chain = chain
        self.owner = owner.lower()
        self.balances: dict[str, int] = {self.owner: balance}
        self.allowances: dict[tuple[str, str], int] = {}
        self.fee = fee
        self.ignore_approve = ignore_approve
        self.approve_status = approve_status
        self.approvals: list[int] = []
        self.balance_reads = 0
        if allowance:
            self.allowances[(self.owner, BULK_SENDER)] = allowance

    async def balance_of(self, address: str) -> int:
        self.balance_reads += 1
        return self.balances.get(address.lower(), 0)

    async def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner.lower(), spender.lower()), 0)

    async def approve(self, spender: str, amount: int) -> str:
        self.approvals.append(amount)
        if not self.ignore_approve and self.approve_status == 1:
            self.allowances[(self.owner, spender.lower())] = amount
        return self.chain.record(status=self.approve_status)

    def transfer_from(self, spender: str, recipient: str, amount: int) -> None:
        key = (self.owner, spender.lower())
        self.allowances[key] = self.allowances.get(key, 0) - amount
        self.balances[self.owner] -= amount
        recipient = recipient.lower()
        self.balances[recipient] = self.balances.get(recipient, 0) + amount - self.fee


class FakeBulkSender:
    """BulkSender double that applies transfers to a :class:`FakeToken`.

    Calls are counted from 0 in submission order. Indices in ``revert_on``
    produce a reverted receipt without moving tokens.
    """

    def __init__(
        self,
        token: FakeToken,
        chain: FakeChain,
        *,
        limit: int = 500,
        simulate_error: Exception | None = None,
        estimate_error: Exception | None = None,
        revert_on: frozenset[int] = frozenset(),
    ) -> None:
        self.token = token
        self.chain = chain
        self.limit = limit
        self.simulate_error = simulate_error
        self.estimate_error = estimate_error
        self.revert_on = revert_on
        self.simulations: list[list[str]] = []
        self.sent: list[dict] = []

    @property
    def address(self) -> str:
        return BULK_SENDER

    async def simulate_bulk_send(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> None:
        self.simulations.append(list(recipients))
        if self.simulate_error is not None:
            raise self.simulate_error

    async def estimate_bulk_send_gas(
        self, token: str, recipients: list[str], amounts: list[int], *, value: int = 0
    ) -> int:
        if self.estimate_error is not None:
            raise self.estimate_error
        return 50_000 + 30_000 * len(recipients)

    async def bulk_send(
        self,
        token: str,
        recipients: list[str],
        amounts: list[int],
        *,
        gas: int | None = None,
        value: int = 0,
    ) -> str:
        call_index = len(self.sent)
        self.sent.append({"recipients": list(recipients), "amounts": list(amounts), "gas": gas})
        if call_index in self.revert_on:
            return self.chain.record(status=0)
        for recipient, amount in zip(recipients, amounts, strict=True):
            self.token.transfer_from(BULK_SENDER, recipient, amount)
        return self.chain.record()

    async def get_recipient_limit(self) -> int:
        return self.limit


class FirstIndicesChooser:
    """Deterministic chooser returning ``0..k-1``."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    def sample(self, population: int, k: int) -> list[int]:
        self.calls.append((population, k))
        return list(range(k))


class FixedChooser:
    """Chooser returning a preset index list regardless of the request."""

    def __init__(self, indices: list[int]) -> None:
        self.indices = indices

    def sample(self, population: int, k: int) -> list[int]:
        return list(self.indices)


def revert_error(reason: str) -> RPCError:
    """RPCError carrying an ``Error(string)`` revert payload."""
    data = "0x08c379a0" + encode(["string"], [reason]).hex()
    return RPCError(3, "execution reverted", data)


__all__ = [
    "BULK_SENDER",
    "OWNER",
    "TOKEN",
    "FakeBulkSender",
    "FakeChain",
    "FakeToken",
    "FirstIndicesChooser",
    "FixedChooser",
    "address",
    "make_entries",
    "revert_error",
]
