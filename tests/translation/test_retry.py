"""Tests for retry with backoff."""

import asyncio
from unittest.mock import AsyncMock, call, patch

import pytest

from verbi.errors import ConfigError, NoProviderError, RetryableError
from verbi.translation.retry import calculate_delay, with_retry


def _flaky(failures: int, result="ok"):
    """Return an async callable that fails *failures* times, then succeeds."""
    attempts = {"n": 0}

    async def fn():
        attempts["n"] += 1
        if attempts["n"] <= failures:
            raise ConnectionError(f"attempt {attempts['n']}")
        return result

    fn.attempts = attempts
    return fn


class TestCalculateDelay:
    def test_exponential(self):
        assert [calculate_delay(1.0, n, "exponential") for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_linear(self):
        assert [calculate_delay(0.5, n, "linear") for n in (1, 2, 3)] == [0.5, 1.0, 1.5]


class TestWithRetry:
    def test_succeeds_after_failures(self):
        fn = _flaky(2)
        on_retry = []
        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            result = asyncio.run(with_retry(
                fn, max_attempts=3, delay=1.0, on_retry=lambda a, e: on_retry.append((a, str(e))),
            ))

        assert result == "ok"
        assert fn.attempts["n"] == 3
        assert on_retry == [(1, "attempt 1"), (2, "attempt 2")]
        assert sleep.await_args_list == [call(1.0), call(2.0)]

    def test_linear_backoff(self):
        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            asyncio.run(with_retry(_flaky(2), delay=0.5, backoff="linear"))
        assert sleep.await_args_list == [call(0.5), call(1.0)]

    def test_last_error_propagates(self):
        fn = _flaky(5)
        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(ConnectionError, match="attempt 3"):
                asyncio.run(with_retry(fn, max_attempts=3))
        assert fn.attempts["n"] == 3

    def test_non_retryable_raises_immediately(self):
        calls = []

        async def fn():
            calls.append(1)
            raise RetryableError("quota exceeded", retryable=False)

        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(RetryableError):
                asyncio.run(with_retry(fn, max_attempts=3))
        assert len(calls) == 1
        sleep.assert_not_awaited()

    @pytest.mark.parametrize("error", [
        NoProviderError("No provider found for locale pair: de>fr"),
        ConfigError("OpenAI API key required"),
    ])
    def test_configuration_errors_not_retried(self, error):
        calls = []

        async def fn():
            calls.append(1)
            raise error

        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(type(error)):
                asyncio.run(with_retry(fn, max_attempts=3))
        assert len(calls) == 1
        sleep.assert_not_awaited()

    def test_first_try_success_no_sleep(self):
        with patch("verbi.translation.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert asyncio.run(with_retry(_flaky(0, result=42))) == 42
        sleep.assert_not_awaited()

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            asyncio.run(with_retry(_flaky(0), max_attempts=0))
