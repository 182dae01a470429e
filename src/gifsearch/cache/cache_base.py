"""Key-value store interface used for result and item caching."""

from abc import ABC, abstractmethod


class KeyValueCache(ABC):
    """Single-key string store with per-entry TTL.

    Only single-key atomicity is assumed; callers never need transactions.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value or ``None`` when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
