"""
apim_orchestrator.retry

Bounded retry helper for fallible async operations.

Responsibilities:
- Call an operation with a 1-indexed attempt number until it succeeds.
- Wait a fixed delay between attempts (no back-off).
- Re-raise the last failure unchanged once attempts are exhausted.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import AsyncRetrying, stop_after_attempt, wait_fixed

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_WAIT_SECONDS = 2.0


async def run_with_retry(
    operation: Callable[[int], Awaitable[T] | T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_wait: float = DEFAULT_RETRY_WAIT_SECONDS,
) -> T:
    """
    Run `operation(attempt)` up to `max_retries` times.

    Both exceptions raised while calling `operation` and exceptions raised by the
    awaitable it returns count as a failed attempt. The caller decides where to wrap;
    nothing in this package retries implicitly.
    """

    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")

    async for attempt in AsyncRetrying(
        reraise=True,
        stop=stop_after_attempt(max_retries),
        wait=wait_fixed(retry_wait),
        sleep=asyncio.sleep,
    ):
        with attempt:
            result = operation(attempt.retry_state.attempt_number)
            if inspect.isawaitable(result):
                result = await result
    return result  # type: ignore[return-value]


# --- Module Notes -----------------------------------------------------------
# The attempt number is passed through so callers can vary behavior per attempt
# (e.g. tests, or their own back-off scheduling).
