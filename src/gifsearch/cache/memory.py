"""Process-local TTL cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from .cache_base import KeyValueCache


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class _CacheEntry:
    value: str
    expires_at: datetime

    def is_valid(self, *, now: datetime) -> bool:
        return now < self.expires_at


class InMemoryCache(KeyValueCache):
    """Dictionary backed store; expired entries read as absent."""

    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or _default_clock
        self._entries: dict[str, _CacheEntry] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_valid(now=self._clock()):
            self._entries.pop(key, None)
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._entries[key] = _CacheEntry(
            value=value,
            expires_at=self._clock() + timedelta(seconds=ttl_seconds),
        )

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InMemoryCache"]
