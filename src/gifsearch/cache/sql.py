"""SQLAlchemy backed cache store."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Iterator

from sqlalchemy import delete, func, select
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session

from ..db.db_models import CacheEntryModel
from ..exceptions import CacheError
from .cache_base import KeyValueCache


def _utcnow_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def handle_sqlalchemy_errors(*, key: str | None = None) -> Iterator[None]:
    """Translate SQLAlchemy errors into :class:`CacheError`."""

    try:
        yield
    except sa_exc.SQLAlchemyError as exc:
        target = f"cache entry '{key}'" if key else "cache"
        raise CacheError(f"{target}: database operation failed") from exc


class SqlCache(KeyValueCache):
    """Store entries in the ``cache_entry`` table.

    Sessions are synchronous, so every operation runs in a worker thread to
    keep the event loop free.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or _utcnow_naive

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        await asyncio.to_thread(self._set_sync, key, value, ttl_seconds)

    def purge_expired(self, reference_time: datetime | None = None) -> int:
        """Delete expired rows and return how many were removed."""
        now = reference_time or self._clock()
        with handle_sqlalchemy_errors(), self._session_factory() as session:
            result = session.execute(
                delete(CacheEntryModel).where(CacheEntryModel.expires_at <= now)
            )
            session.commit()
            return int(result.rowcount or 0)

    def count_expired(self, reference_time: datetime | None = None) -> int:
        now = reference_time or self._clock()
        with handle_sqlalchemy_errors(), self._session_factory() as session:
            return int(
                session.scalar(
                    select(func.count())
                    .select_from(CacheEntryModel)
                    .where(CacheEntryModel.expires_at <= now)
                )
                or 0
            )

    def _get_sync(self, key: str) -> str | None:
        with handle_sqlalchemy_errors(key=key), self._session_factory() as session:
            model = session.get(CacheEntryModel, key)
            if model is None or model.expires_at <= self._clock():
                return None
            return model.value

    def _set_sync(self, key: str, value: str, ttl_seconds: int) -> None:
        now = self._clock()
        expires_at = now + timedelta(seconds=ttl_seconds)
        with handle_sqlalchemy_errors(key=key), self._session_factory() as session:
            model = session.get(CacheEntryModel, key)
            if model is None:
                session.add(
                    CacheEntryModel(key=key, value=value, expires_at=expires_at, updated_at=now)
                )
            else:
                model.value = value
                model.expires_at = expires_at
                model.updated_at = now
            session.commit()


__all__ = ["SqlCache", "handle_sqlalchemy_errors"]
