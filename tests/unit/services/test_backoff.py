from __future__ import annotations

import pytest

from src.gifsearch.services.backoff import BackoffPolicy, CircuitBreaker, wrap_sleep


@pytest.mark.parametrize("attempts, expected", [(0, 0.0), (1, 0.5), (2, 1.0), (3, 1.5), (7, 1.5)])
def test_backoff_delay_is_linear_and_capped(attempts: int, expected: float) -> None:
    assert BackoffPolicy(base_seconds=0.5, cap_seconds=1.5).delay(attempts) == expected


def test_backoff_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        BackoffPolicy(base_seconds=-1)


def test_circuit_breaker_opens_after_consecutive_failures() -> None:
    breaker = CircuitBreaker(threshold=3)

    breaker.record_failure()
    breaker.record_failure()
    breaker.record_success()
    assert breaker.failures == 0

    for _ in range(3):
        breaker.record_failure()
    assert breaker.is_open is True


@pytest.mark.asyncio
async def test_wrap_sleep_accepts_sync_callables() -> None:
    recorded: list[float] = []

    sleep = wrap_sleep(recorded.append)
    await sleep(0.25)

    assert recorded == [0.25]
