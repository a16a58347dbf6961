"""
tests.test_retry

Behavior of the bounded retry helper.
"""

from __future__ import annotations

import pytest

import apim_orchestrator.retry as retry_mod
from apim_orchestrator.retry import run_with_retry


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    recorded: list[float] = []

    async def _sleep(delay: float) -> None:
        recorded.append(delay)

    monkeypatch.setattr(retry_mod.asyncio, "sleep", _sleep)
    return recorded


@pytest.mark.asyncio
async def test_returns_value_after_first_run(sleeps: list[float]) -> None:
    attempts: list[int] = []

    async def op(attempt: int) -> str:
        attempts.append(attempt)
        return "success"

    assert await run_with_retry(op) == "success"
    assert attempts == [1]
    assert sleeps == []


@pytest.mark.asyncio
async def test_retries_after_failed_awaitable(sleeps: list[float]) -> None:
    attempts: list[int] = []

    async def op(attempt: int) -> str:
        attempts.append(attempt)
        if attempt == 1:
            raise RuntimeError("rejected")
        return "success"

    assert await run_with_retry(op) == "success"
    assert attempts == [1, 2]


@pytest.mark.asyncio
async def test_retries_after_synchronous_raise(sleeps: list[float]) -> None:
    attempts: list[int] = []

    def op(attempt: int):
        attempts.append(attempt)
        if attempt == 1:
            raise ValueError("Ooops!")

        async def _ok() -> str:
            return "success"

        return _ok()

    assert await run_with_retry(op) == "success"
    assert attempts == [1, 2]


@pytest.mark.asyncio
async def test_succeeds_on_attempt_k_with_exactly_k_calls(sleeps: list[float]) -> None:
    attempts: list[int] = []

    async def op(attempt: int) -> int:
        attempts.append(attempt)
        if attempt < 4:
            raise RuntimeError(f"attempt {attempt}")
        return attempt * 10

    assert await run_with_retry(op, max_retries=5, retry_wait=0.1) == 40
    assert attempts == [1, 2, 3, 4]
    assert sleeps == [0.1, 0.1, 0.1]


@pytest.mark.asyncio
async def test_raises_last_failure_unchanged_after_max_retries(sleeps: list[float]) -> None:
    attempts: list[int] = []
    raised: list[Exception] = []

    async def op(attempt: int) -> None:
        attempts.append(attempt)
        err = RuntimeError(f"rejected {attempt}")
        raised.append(err)
        raise err

    with pytest.raises(RuntimeError) as exc_info:
        await run_with_retry(op, max_retries=5, retry_wait=0.1)

    assert attempts == [1, 2, 3, 4, 5]
    assert exc_info.value is raised[-1]
    # Fixed delay between attempts, none after the last one.
    assert sleeps == [0.1] * 4


@pytest.mark.asyncio
async def test_default_policy_is_three_attempts_two_seconds(sleeps: list[float]) -> None:
    calls = 0

    async def op(attempt: int) -> None:
        nonlocal calls
        calls += 1
        raise KeyError("missing")

    with pytest.raises(KeyError):
        await run_with_retry(op)

    assert calls == 3
    assert sleeps == [2.0, 2.0]


@pytest.mark.asyncio
async def test_accepts_plain_return_values(sleeps: list[float]) -> None:
    assert await run_with_retry(lambda attempt: attempt + 1) == 2


@pytest.mark.asyncio
async def test_rejects_non_positive_max_retries() -> None:
    with pytest.raises(ValueError):
        await run_with_retry(lambda attempt: None, max_retries=0)
