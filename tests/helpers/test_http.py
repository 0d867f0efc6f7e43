"""Tests for HTTP client creation and the retry decorator."""

import httpx
import pytest

from bulksender.helpers.http import create_http_client, retry_with_backoff
from bulksender.helpers.rpc import RPCError


class TestRetryWithBackoff:
    """Tests for retry_with_backoff decorator."""

    @pytest.mark.asyncio
    async def test_succeeds_on_first_try(self) -> None:
        """Test function succeeds without retries."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def read() -> int:
            nonlocal call_count
            call_count += 1
            return 42

        assert await read() == 42
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_retries_on_rpc_error(self) -> None:
        """Test RPC errors from the node are retried."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def read() -> int:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise RPCError(-32005, "rate limited")
            return 7

        assert await read() == 7
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_retries_on_timeout(self) -> None:
        """Test timeouts are retried."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01)
        async def read() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise httpx.TimeoutException("Timeout")
            return "ok"

        assert await read() == "ok"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self) -> None:
        """Test the last error propagates once retries are exhausted."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def always_fails() -> None:
            nonlocal call_count
            call_count += 1
            raise httpx.HTTPError("Persistent error")

        with pytest.raises(httpx.HTTPError, match="Persistent error"):
            await always_fails()
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        """Test unrelated exceptions propagate immediately."""
        call_count = 0

        @retry_with_backoff(max_retries=3, base_delay=0.01, log_errors=False)
        async def broken() -> None:
            nonlocal call_count
            call_count += 1
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await broken()
        assert call_count == 1

    def test_preserves_function_name(self) -> None:
        """Test the decorator keeps the wrapped function's metadata."""

        @retry_with_backoff(log_errors=False)
        async def documented() -> None:
            """Docstring."""

        assert documented.__name__ == "documented"
        assert documented.__doc__ == "Docstring."


class TestCreateHttpClient:
    """Tests for create_http_client."""

    @pytest.mark.asyncio
    async def test_default_timeout(self) -> None:
        """Test the default timeout is applied."""
        async with create_http_client() as client:
            assert client.timeout.read == 30.0

    @pytest.mark.asyncio
    async def test_custom_timeout(self) -> None:
        """Test a custom timeout."""
        async with create_http_client(timeout=5.0) as client:
            assert client.timeout.read == 5.0
