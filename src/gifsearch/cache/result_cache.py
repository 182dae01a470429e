"""Typed cache facade for per-query result sets and per-item hosted media.

Cache failures never fail a search: reads that error out behave like a miss
and writes that error out are skipped, both with a warning in the log.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Sequence
from urllib.parse import quote

from ..domain.models import CachedResultSet, MediaItem
from .cache_base import KeyValueCache

RESULT_SET_PREFIX = "gif_search:"
ITEM_PREFIX = "gif_item:"
DEFAULT_TTL_SECONDS = 24 * 60 * 60


def normalize_query(query: str) -> str:
    return query.strip().lower()


def result_set_key(query: str) -> str:
    return f"{RESULT_SET_PREFIX}{quote(normalize_query(query), safe='')}"


def item_key(media_id: str) -> str:
    return f"{ITEM_PREFIX}{media_id}"


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


class ResultCache:
    """Serialize pipeline objects into a :class:`KeyValueCache`."""

    def __init__(
        self,
        store: KeyValueCache,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._store = store
        self._ttl_seconds = ttl_seconds
        self._clock = clock or _default_clock
        self._logger = logger or logging.getLogger(__name__)

    def now(self) -> datetime:
        return self._clock()

    async def get_result_set(self, query: str) -> CachedResultSet | None:
        key = result_set_key(query)
        payload = await self._read(key)
        if payload is None:
            return None
        try:
            cached = CachedResultSet.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError):
            self._logger.warning("cache.result_set.corrupt", extra={"key": key})
            return None
        if cached.is_expired(now=self._clock()):
            return None
        cached.items = [item for item in cached.items if item.is_hosted]
        return cached

    async def put_result_set(self, query: str, items: Sequence[MediaItem]) -> None:
        hosted = [item for item in items if item.is_hosted]
        if not hosted:
            return
        result_set = CachedResultSet(
            query=normalize_query(query),
            items=hosted,
            expires_at=self._clock() + timedelta(seconds=self._ttl_seconds),
        )
        await self._write(result_set_key(query), result_set.to_dict())

    async def get_item(self, media_id: str) -> MediaItem | None:
        if not media_id:
            return None
        key = item_key(media_id)
        payload = await self._read(key)
        if payload is None:
            return None
        try:
            item = MediaItem.from_dict(payload)
        except (AttributeError, KeyError, TypeError, ValueError):
            self._logger.warning("cache.item.corrupt", extra={"key": key})
            return None
        return item if item.is_hosted else None

    async def put_item(self, item: MediaItem) -> None:
        if not item.id or not item.is_hosted:
            return
        await self._write(item_key(item.id), item.to_dict())

    async def _read(self, key: str) -> dict | None:
        try:
            raw = await self._store.get(key)
        except Exception:
            self._logger.warning("cache.read.failed", extra={"key": key}, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
        except ValueError:
            self._logger.warning("cache.read.malformed", extra={"key": key})
            return None
        return payload if isinstance(payload, dict) else None

    async def _write(self, key: str, payload: dict) -> None:
        try:
            await self._store.set(key, json.dumps(payload), self._ttl_seconds)
        except Exception:
            self._logger.warning("cache.write.failed", extra={"key": key}, exc_info=True)


__all__ = [
    "ITEM_PREFIX",
    "RESULT_SET_PREFIX",
    "ResultCache",
    "item_key",
    "normalize_query",
    "result_set_key",
]
