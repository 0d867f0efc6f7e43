"""Tests for the balance and allowance guard."""

import pytest

from bulksender.dispatch.guard import AllowanceGuard, AllowanceState
from bulksender.errors import ApprovalFailed, InsufficientBalance, TransactionReverted

from tests.fakes import BULK_SENDER, OWNER, FakeChain, FakeToken


def make_guard(token: FakeToken, chain: FakeChain) -> AllowanceGuard:
    return AllowanceGuard(token, chain, OWNER, BULK_SENDER)


class TestCheckBalance:
    """Tests for AllowanceGuard.check_balance."""

    @pytest.mark.asyncio
    async def test_sufficient(self, chain: FakeChain) -> None:
        """Test an exact balance is enough."""
        token = FakeToken(chain, balance=1000)

        assert await make_guard(token, chain).check_balance(1000) == 1000

    @pytest.mark.asyncio
    async def test_insufficient(self, chain: FakeChain) -> None:
        """Test a short balance fails with both amounts."""
        token = FakeToken(chain, balance=999)

        with pytest.raises(InsufficientBalance) as exc_info:
            await make_guard(token, chain).check_balance(1000)

        assert exc_info.value.required == 1000
        assert exc_info.value.available == 999
        assert "Required: 1000, Available: 999" in str(exc_info.value)


class TestEnsureAllowance:
    """Tests for the allowance state machine."""

    @pytest.mark.asyncio
    async def test_sufficient_allowance_writes_nothing(self, chain: FakeChain) -> None:
        """Test A >= R issues zero writes."""
        token = FakeToken(chain, allowance=500)
        guard = make_guard(token, chain)

        assert await guard.ensure_allowance(500) == 500

        assert token.approvals == []
        assert guard.state is AllowanceState.CHECKED_SUFFICIENT

    @pytest.mark.asyncio
    async def test_zero_allowance_one_write(self, chain: FakeChain) -> None:
        """Test A == 0 issues exactly one approve of the required total."""
        token = FakeToken(chain)
        guard = make_guard(token, chain)

        assert await guard.ensure_allowance(300) == 300

        assert token.approvals == [300]
        assert guard.history == [
            AllowanceState.UNKNOWN,
            AllowanceState.CHECKED_INSUFFICIENT,
            AllowanceState.APPROVING,
            AllowanceState.APPROVED,
        ]

    @pytest.mark.asyncio
    async def test_partial_allowance_resets_first(self, chain: FakeChain) -> None:
        """Test 0 < A < R resets to zero and then approves R."""
        token = FakeToken(chain, allowance=100)
        guard = make_guard(token, chain)

        await guard.ensure_allowance(300)

        assert token.approvals == [0, 300]
        assert AllowanceState.RESETTING in guard.history
        assert guard.state is AllowanceState.APPROVED

    @pytest.mark.asyncio
    async def test_each_write_confirmed_before_next(self, chain: FakeChain) -> None:
        """Test the reset is confirmed before the approval is sent."""
        token = FakeToken(chain, allowance=100)
        guard = make_guard(token, chain)

        await guard.ensure_allowance(300)

        assert chain.waited == guard.transactions
        assert len(guard.transactions) == 2

    @pytest.mark.asyncio
    async def test_approval_not_applied(self, chain: FakeChain) -> None:
        """Test a confirmed approval that leaves the allowance short fails."""
        token = FakeToken(chain, ignore_approve=True)

        with pytest.raises(ApprovalFailed) as exc_info:
            await make_guard(token, chain).ensure_allowance(300)

        assert exc_info.value.expected == 300
        assert exc_info.value.actual == 0

    @pytest.mark.asyncio
    async def test_reverted_approval(self, chain: FakeChain) -> None:
        """Test a reverted approve receipt is fatal."""
        token = FakeToken(chain, approve_status=0)

        with pytest.raises(TransactionReverted):
            await make_guard(token, chain).ensure_allowance(300)

        assert token.approvals == [300]


class TestPrepare:
    """Tests for AllowanceGuard.prepare."""

    @pytest.mark.asyncio
    async def test_balance_checked_before_any_write(self, chain: FakeChain) -> None:
        """Test an insufficient balance aborts before approving."""
        token = FakeToken(chain, balance=10)

        with pytest.raises(InsufficientBalance):
            await make_guard(token, chain).prepare(300)

        assert token.approvals == []

    @pytest.mark.asyncio
    async def test_prepare_approves(self, chain: FakeChain) -> None:
        """Test a funded sender ends with enough allowance."""
        token = FakeToken(chain, balance=1000)

        await make_guard(token, chain).prepare(300)

        assert await token.allowance(OWNER, BULK_SENDER) == 300
