"""Retry an async call with linear or exponential backoff."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_DELAY = 1.0  # seconds

RetryCallback = Callable[[int, BaseException], None]


def calculate_delay(base_delay: float, attempt: int, backoff: str) -> float:
    """Delay after the 1-based ``attempt`` failed."""
    if backoff == "exponential":
        return base_delay * 2 ** (attempt - 1)
    return base_delay * attempt


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    delay: float = DEFAULT_DELAY,
    backoff: str = "exponential",
    on_retry: RetryCallback | None = None,
) -> T:
    """Await ``fn()`` up to ``max_attempts`` times.

    ``on_retry(attempt, error)`` runs before each sleep. The error of the final
    attempt propagates unchanged, as does any error whose ``retryable``
    attribute is False.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await fn()
        except Exception as e:
            if attempt == max_attempts or not getattr(e, "retryable", True):
                raise
            if on_retry is not None:
                on_retry(attempt, e)
            await asyncio.sleep(calculate_delay(delay, attempt, backoff))

    raise AssertionError("unreachable")
