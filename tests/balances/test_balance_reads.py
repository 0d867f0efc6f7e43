"""Tests for the balance snapshot and live verification commands."""

import json
from io import StringIO
from unittest.mock import AsyncMock

import httpx
import pytest
from rich.console import Console

from bulksender.balances import read_balances as read_balances_module
from bulksender.balances import verify_balances as verify_balances_module
from bulksender.balances.read_balances import read_balances
from bulksender.helpers.rpc import RPCError
from bulksender.ledger.loader import load_balance_snapshot


ADDR_1 = "0x" + "1" * 40
ADDR_2 = "0x" + "2" * 40
ADDR_3 = "0xAbCdEf0123456789abcdef0123456789ABCDEF01"


class StaticToken:
    """Token double serving fixed balances."""

    def __init__(self, balances: dict[str, int]) -> None:
        self.balances = {address.lower(): balance for address, balance in balances.items()}
        self.requested: list[str] = []

    async def balance_of(self, address: str) -> int:
        self.requested.append(address)
        return self.balances.get(address.lower(), 0)

    async def symbol(self) -> str:
        return "TKN"

    async def decimals(self) -> int:
        return 6


@pytest.fixture
def no_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("bulksender.helpers.http.sleep", AsyncMock())


def quiet_console() -> Console:
    return Console(file=StringIO(), color_system=None)


class TestReadBalances:
    """Tests for read_balances."""

    @pytest.mark.asyncio
    async def test_input_order_across_chunks(self) -> None:
        """Test every address is read once and results keep input order."""
        token = StaticToken({ADDR_1: 5, ADDR_3: 7})
        addresses = [ADDR_3, ADDR_2, ADDR_1]

        results = await read_balances(token, addresses, chunk_size=2, console=quiet_console())

        assert results == [(ADDR_3, 7), (ADDR_2, 0), (ADDR_1, 5)]
        assert sorted(token.requested) == sorted(addresses)

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("no_backoff")
    async def test_transient_failures_retried(self) -> None:
        """Test a flaky read is retried instead of recorded as zero."""
        token = StaticToken({ADDR_1: 9})
        failures = iter([httpx.ConnectError("reset"), RPCError(-32005, "rate limited")])
        original = token.balance_of

        async def flaky(address: str) -> int:
            error = next(failures, None)
            if error is not None:
                raise error
            return await original(address)

        token.balance_of = flaky  # type: ignore[method-assign]

        results = await read_balances(token, [ADDR_1], console=quiet_console())

        assert results == [(ADDR_1, 9)]

    @pytest.mark.asyncio
    @pytest.mark.usefixtures("no_backoff")
    async def test_persistent_failure_propagates(self) -> None:
        """Test a read that keeps failing raises rather than reporting zero."""
        token = StaticToken({})
        token.balance_of = AsyncMock(side_effect=RPCError(-32000, "header not found"))  # type: ignore[method-assign]

        with pytest.raises(RPCError, match="header not found"):
            await read_balances(token, [ADDR_1], console=quiet_console())


class TestSnapshotCommand:
    """Tests for read_balances.main."""

    @pytest.mark.asyncio
    async def test_writes_snapshot_readable_as_end_balances(
        self, monkeypatch: pytest.MonkeyPatch, write_csv, tmp_path
    ) -> None:
        """Test the written CSV loads back as a headed balance snapshot."""
        token = StaticToken({ADDR_1: 10**30, ADDR_3: 1})
        monkeypatch.setattr(read_balances_module, "ERC20Token", lambda *args: token)
        recipients = write_csv(f"{ADDR_1},1\n{ADDR_3},2\n", "recipients.csv")
        output = tmp_path / "data" / "current_balances.csv"

        code = await read_balances_module.main("http://localhost:8545", ADDR_2, recipients, output)

        assert code == 0
        assert output.read_text().splitlines()[0] == "address,current_balance"
        assert load_balance_snapshot(output, has_header=True) == {
            ADDR_1: 10**30,
            ADDR_3.lower(): 1,
        }

    @pytest.mark.asyncio
    async def test_invalid_recipients(self, write_csv, tmp_path) -> None:
        """Test a bad recipient list exits 1 before any read."""
        recipients = write_csv("not-an-address,1\n", "recipients.csv")

        code = await read_balances_module.main(
            "http://localhost:8545", ADDR_2, recipients, tmp_path / "out.csv"
        )

        assert code == 1
        assert not (tmp_path / "out.csv").exists()


class TestVerifyBalancesCommand:
    """Tests for verify_balances.main."""

    @pytest.mark.asyncio
    async def test_reports_mismatches(
        self, monkeypatch: pytest.MonkeyPatch, write_csv, tmp_path
    ) -> None:
        """Test live balances are compared with summed expected amounts."""
        token = StaticToken({ADDR_1: 15, ADDR_2: 4})
        monkeypatch.setattr(verify_balances_module, "ERC20Token", lambda *args: token)
        recipients = write_csv(f"{ADDR_1},10\n{ADDR_2},5\n{ADDR_1},5\n", "recipients.csv")
        output = tmp_path / "results.json"

        code = await verify_balances_module.main(
            "http://localhost:8545", ADDR_3, recipients, output
        )

        assert code == 0
        data = json.loads(output.read_text())
        assert data[0] == {
            "address": ADDR_1,
            "expectedAmount": "15",
            "actualBalance": "15",
            "matches": True,
            "difference": None,
        }
        assert data[1]["difference"] == "-1"
