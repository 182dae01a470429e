"""Outbound facade of the GIF search core and its default wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from ..cache.cache_base import KeyValueCache
from ..cache.memory import InMemoryCache
from ..cache.result_cache import ResultCache
from ..cache.sql import SqlCache
from ..config import GifSearchConfig
from ..db.db_init import create_session_factory
from ..domain.models import MediaItem
from ..hosting.media_host import HttpMediaHost, MediaHost
from ..hosting.uploader import RehostUploader
from ..providers.providers_base import SearchProvider
from ..providers.providers_giphy import GiphyProvider
from .batch import BatchSearchOrchestrator, ResultCallback
from .search_pipeline import SearchPipeline

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GifSearchService:
    """Entry points used by the request handlers of the game."""

    pipeline: SearchPipeline
    orchestrator: BatchSearchOrchestrator

    async def search_one(self, query: str, limit: int = 4) -> list[MediaItem]:
        return await self.pipeline.search(query, limit)

    async def search_many(
        self,
        queries: Iterable[str],
        limit: int = 4,
        on_result: ResultCallback | None = None,
    ) -> dict[str, list[MediaItem]]:
        return await self.orchestrator.search_many(queries, limit, on_result=on_result)

    async def aclose(self) -> None:
        await self.orchestrator.aclose()


def build_cache_store(config: GifSearchConfig) -> KeyValueCache:
    """Use the SQL store when a database is configured, memory otherwise."""
    if config.database_url:
        return SqlCache(create_session_factory(config.database_url))
    logger.info("gif_search.cache.in_memory")
    return InMemoryCache()


def build_gif_search_service(
    config: GifSearchConfig | None = None,
    *,
    cache_store: KeyValueCache | None = None,
    media_host: MediaHost | None = None,
    provider: SearchProvider | None = None,
    sleep: Callable[[float], Any] | None = None,
) -> GifSearchService:
    """Wire provider, uploader, cache, pipeline and orchestrator from ``config``."""
    config = config or GifSearchConfig.build_default()

    if media_host is None:
        if not config.media_host_url:
            raise ValueError("media_host_url must be configured when no media host is supplied")
        media_host = HttpMediaHost(
            endpoint=config.media_host_url,
            token=config.media_host_token,
        )
    if provider is None:
        provider = GiphyProvider(
            api_key=config.giphy_api_key,
            api_url=config.giphy_api_url,
            rating=config.content_rating,
            timeout_seconds=config.provider_timeout_seconds,
        )

    uploader = RehostUploader(
        host=media_host,
        first_party_pattern=config.first_party_url_pattern,
        timeout_seconds=config.upload_timeout_seconds,
        media_type=config.media_type,
    )
    cache = ResultCache(
        cache_store if cache_store is not None else build_cache_store(config),
        ttl_seconds=config.cache_ttl_seconds,
    )
    pipeline = SearchPipeline.from_config(
        config, provider=provider, uploader=uploader, cache=cache, sleep=sleep
    )
    orchestrator = BatchSearchOrchestrator.from_config(config, pipeline=pipeline, sleep=sleep)
    return GifSearchService(pipeline=pipeline, orchestrator=orchestrator)


__all__ = ["GifSearchService", "build_cache_store", "build_gif_search_service"]
