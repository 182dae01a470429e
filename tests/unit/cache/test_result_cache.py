from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.gifsearch.cache.memory import InMemoryCache
from src.gifsearch.cache.result_cache import (
    ResultCache,
    item_key,
    normalize_query,
    result_set_key,
)
from src.gifsearch.domain.models import RENDITION_COMPACT, MediaItem, Rendition
from tests.mocks.fakes import BrokenCache


def _hosted(media_id: str, hosted: bool = True) -> MediaItem:
    return MediaItem(
        id=media_id,
        title=f"{media_id} title",
        description=f"{media_id} description",
        renditions={RENDITION_COMPACT: Rendition(url=f"https://media.giphy.com/media/{media_id}/200.gif", width=356, height=200)},
        hosted_url=f"https://i.redd.it/{media_id}.gif" if hosted else "",
    )


def test_keys_use_normalized_query() -> None:
    assert normalize_query("  Hot Coffee ") == "hot coffee"
    assert result_set_key("  Hot Coffee ") == "gif_search:hot%20coffee"
    assert item_key("abc") == "gif_item:abc"


@pytest.mark.asyncio
async def test_result_set_round_trip_drops_unhosted_items() -> None:
    store = InMemoryCache()
    cache = ResultCache(store)

    await cache.put_result_set("Coffee", [_hosted("a"), _hosted("b", hosted=False), _hosted("c")])
    cached = await cache.get_result_set(" coffee ")

    assert cached is not None
    assert cached.query == "coffee"
    assert [item.id for item in cached.items] == ["a", "c"]
    assert cached.items[0].rendition(RENDITION_COMPACT).width == 356
    assert cached.satisfies(2, now=cache.now()) is True
    assert cached.satisfies(3, now=cache.now()) is False


@pytest.mark.asyncio
async def test_empty_result_set_is_not_written() -> None:
    store = InMemoryCache()
    cache = ResultCache(store)

    await cache.put_result_set("coffee", [_hosted("a", hosted=False)])

    assert len(store) == 0


@pytest.mark.asyncio
async def test_expired_result_set_reads_as_missing() -> None:
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    store = InMemoryCache(clock=lambda: now)
    cache = ResultCache(store, clock=lambda: now)
    await cache.put_result_set("coffee", [_hosted("a")])

    later = ResultCache(store, clock=lambda: now + timedelta(hours=25))

    assert await later.get_result_set("coffee") is None


@pytest.mark.asyncio
async def test_item_round_trip_requires_hosted_url() -> None:
    cache = ResultCache(InMemoryCache())

    await cache.put_item(_hosted("a"))
    await cache.put_item(_hosted("b", hosted=False))

    item = await cache.get_item("a")
    assert item is not None and item.hosted_url == "https://i.redd.it/a.gif"
    assert await cache.get_item("b") is None
    assert await cache.get_item("") is None


@pytest.mark.asyncio
async def test_store_failures_are_swallowed(caplog) -> None:
    cache = ResultCache(BrokenCache())

    await cache.put_result_set("coffee", [_hosted("a")])
    await cache.put_item(_hosted("a"))

    assert await cache.get_result_set("coffee") is None
    assert await cache.get_item("a") is None
    assert any(record.getMessage() == "cache.read.failed" for record in caplog.records)
    assert any(record.getMessage() == "cache.write.failed" for record in caplog.records)


@pytest.mark.asyncio
async def test_malformed_payloads_read_as_missing() -> None:
    store = InMemoryCache()
    cache = ResultCache(store)
    await store.set(result_set_key("coffee"), "{not json", 60)
    await store.set(item_key("a"), json.dumps({"title": "no id"}), 60)
    await store.set(item_key("b"), json.dumps({"id": "b", "renditions": [1]}), 60)
    expires = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
    await store.set(
        result_set_key("tea"),
        json.dumps({"query": "tea", "items": [{"id": "x", "renditions": [1]}], "expires_at": expires}),
        60,
    )
    await store.set(
        result_set_key("juice"),
        json.dumps({"query": "juice", "items": ["x", 3], "expires_at": expires}),
        60,
    )

    assert await cache.get_result_set("coffee") is None
    assert await cache.get_result_set("tea") is None
    assert await cache.get_result_set("juice") is None
    assert await cache.get_item("a") is None
    assert await cache.get_item("b") is None
