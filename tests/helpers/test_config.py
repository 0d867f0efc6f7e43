"""Tests for configuration and environment variable helpers."""

import pytest

from bulksender.helpers.config import (
    get_eth_rpc_url,
    get_float_env,
    get_int_env,
    get_optional_env,
    get_required_env,
)


class TestGetRequiredEnv:
    """Tests for get_required_env."""

    def test_returns_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a set variable is returned."""
        monkeypatch.setenv("BS_TEST_KEY", "value")

        assert get_required_env("BS_TEST_KEY") == "value"

    def test_missing_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing variable raises with its name."""
        monkeypatch.delenv("BS_TEST_KEY", raising=False)

        with pytest.raises(ValueError, match="BS_TEST_KEY environment variable is not set"):
            get_required_env("BS_TEST_KEY")

    def test_empty_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an empty variable counts as missing."""
        monkeypatch.setenv("BS_TEST_KEY", "")

        with pytest.raises(ValueError):
            get_required_env("BS_TEST_KEY")


class TestGetOptionalEnv:
    """Tests for get_optional_env."""

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the default is used when unset."""
        monkeypatch.delenv("BS_TEST_KEY", raising=False)

        assert get_optional_env("BS_TEST_KEY", "data/recipients.csv") == "data/recipients.csv"


class TestNumericEnv:
    """Tests for get_int_env and get_float_env."""

    def test_int_parsed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test integer values are parsed."""
        monkeypatch.setenv("BATCH_SIZE", " 150 ")

        assert get_int_env("BATCH_SIZE", 200) == 150

    def test_int_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test unset values fall back to the default."""
        monkeypatch.delenv("BATCH_SIZE", raising=False)

        assert get_int_env("BATCH_SIZE", 200) == 200

    def test_int_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test non-integer values raise."""
        monkeypatch.setenv("BATCH_SIZE", "lots")

        with pytest.raises(ValueError, match="BATCH_SIZE must be an integer"):
            get_int_env("BATCH_SIZE", 200)

    def test_float_parsed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test float values are parsed."""
        monkeypatch.setenv("CONFIRMATION_TIMEOUT", "12.5")

        assert get_float_env("CONFIRMATION_TIMEOUT", 300.0) == 12.5

    def test_float_invalid(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test non-numeric values raise."""
        monkeypatch.setenv("CONFIRMATION_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="must be a number"):
            get_float_env("CONFIRMATION_TIMEOUT", 300.0)


class TestGetEthRpcUrl:
    """Tests for get_eth_rpc_url."""

    def test_explicit_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test an explicit URL is returned as is."""
        monkeypatch.setenv("ETH_RPC_URL", "https://env.rpc")

        assert get_eth_rpc_url("https://cli.rpc") == "https://cli.rpc"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the environment is used when no URL is given."""
        monkeypatch.setenv("ETH_RPC_URL", "https://env.rpc")

        assert get_eth_rpc_url() == "https://env.rpc"

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a missing URL raises."""
        monkeypatch.delenv("ETH_RPC_URL", raising=False)

        with pytest.raises(ValueError, match="ETH_RPC_URL must be provided"):
            get_eth_rpc_url()
