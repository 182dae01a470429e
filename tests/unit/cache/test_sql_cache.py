from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from src.gifsearch.cache.sql import SqlCache
from src.gifsearch.db.db_init import create_session_factory
from src.gifsearch.exceptions import CacheError


class FrozenClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def session_factory(tmp_path: Path) -> sessionmaker[Session]:
    return create_session_factory(f"sqlite:///{tmp_path / 'cache.db'}")


@pytest.mark.asyncio
async def test_set_get_and_overwrite(session_factory) -> None:
    cache = SqlCache(session_factory)

    await cache.set("gif_item:a", "one", ttl_seconds=60)
    await cache.set("gif_item:a", "two", ttl_seconds=60)

    assert await cache.get("gif_item:a") == "two"
    assert await cache.get("gif_item:missing") is None


@pytest.mark.asyncio
async def test_expired_rows_are_hidden_and_purged(session_factory) -> None:
    clock = FrozenClock()
    cache = SqlCache(session_factory, clock=clock)
    await cache.set("short", "v", ttl_seconds=10)
    await cache.set("long", "v", ttl_seconds=3600)

    clock.now += timedelta(seconds=11)

    assert await cache.get("short") is None
    assert await cache.get("long") == "v"
    assert cache.count_expired() == 1
    assert cache.purge_expired() == 1
    assert cache.count_expired() == 0


@pytest.mark.asyncio
async def test_database_errors_surface_as_cache_error(session_factory) -> None:
    with session_factory() as session:
        session.execute(text("DROP TABLE cache_entry"))
        session.commit()
    cache = SqlCache(session_factory)

    with pytest.raises(CacheError):
        await cache.get("anything")
