"""Backoff and circuit-breaking policies shared by retrying call sites."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

SleepFunc = Callable[[float], Awaitable[None]]


def wrap_sleep(sleep: Callable[[float], Any] | None) -> SleepFunc:
    """Accept a sync or async sleep callable; default to ``asyncio.sleep``."""

    if sleep is None:
        return asyncio.sleep

    async def _async_sleep(seconds: float) -> None:
        result = sleep(seconds)
        if inspect.isawaitable(result):
            await result

    return _async_sleep


@dataclass(slots=True, frozen=True)
class BackoffPolicy:
    """Linear backoff: ``delay = min(base * attempts, cap)``."""

    base_seconds: float = 0.5
    cap_seconds: float = 1.5

    def __post_init__(self) -> None:
        if self.base_seconds < 0:
            raise ValueError("base_seconds cannot be negative")
        if self.cap_seconds < 0:
            raise ValueError("cap_seconds cannot be negative")

    def delay(self, attempts: int) -> float:
        if attempts <= 0:
            return 0.0
        return min(self.base_seconds * attempts, self.cap_seconds)


@dataclass(slots=True)
class CircuitBreaker:
    """Open after ``threshold`` consecutive failures; any success resets it."""

    threshold: int = 3
    failures: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError("threshold must be at least 1")

    @property
    def is_open(self) -> bool:
        return self.failures >= self.threshold

    def record_failure(self) -> int:
        self.failures += 1
        return self.failures

    def record_success(self) -> None:
        self.failures = 0


__all__ = ["BackoffPolicy", "CircuitBreaker", "SleepFunc", "wrap_sleep"]
