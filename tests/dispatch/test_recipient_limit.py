"""Tests for the recipient limit command."""

import pytest

from bulksender.dispatch import recipient_limit
from bulksender.helpers.rpc import RPCError

from tests.fakes import BULK_SENDER, FakeChain


class FakeLimitContract:
    def __init__(self, chain: FakeChain, limit: int, *, owner: bool = True) -> None:
        self.chain = chain
        self.limit = limit
        self.owner = owner
        self.writes: list[int] = []

    async def get_recipient_limit(self) -> int:
        return self.limit

    async def set_recipient_limit(self, limit: int) -> str:
        if not self.owner:
            msg = "execution reverted: Ownable: caller is not the owner"
            raise RPCError(3, msg)
        self.writes.append(limit)
        self.limit = limit
        return self.chain.record()


@pytest.fixture
def contract(monkeypatch: pytest.MonkeyPatch, chain: FakeChain) -> FakeLimitContract:
    fake = FakeLimitContract(chain, 200)
    monkeypatch.setattr(recipient_limit, "TransactionSender", lambda *args, **kwargs: chain)
    monkeypatch.setattr(recipient_limit, "BulkSender", lambda *args: fake)
    return fake


class TestRecipientLimit:
    """Tests for recipient_limit.main."""

    @pytest.mark.asyncio
    async def test_read_only(self, contract: FakeLimitContract) -> None:
        """Test reading the limit sends nothing."""
        code = await recipient_limit.main("http://localhost:8545", "0x01", BULK_SENDER)

        assert code == 0
        assert contract.writes == []

    @pytest.mark.asyncio
    async def test_set_waits_for_confirmation(
        self, contract: FakeLimitContract, chain: FakeChain
    ) -> None:
        """Test a new limit is confirmed before it is read back."""
        code = await recipient_limit.main("http://localhost:8545", "0x01", BULK_SENDER, 500)

        assert code == 0
        assert contract.writes == [500]
        assert len(chain.waited) == 1

    @pytest.mark.asyncio
    async def test_not_owner(self, contract: FakeLimitContract) -> None:
        """Test a rejected update exits 1."""
        contract.owner = False

        code = await recipient_limit.main("http://localhost:8545", "0x01", BULK_SENDER, 500)

        assert code == 1
