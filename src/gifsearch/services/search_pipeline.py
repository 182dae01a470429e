"""Single-query acquisition pipeline.

One run walks provider pages in order, re-hosts candidates one at a time and
drops near-duplicates until enough items are accepted, the provider runs dry,
or the circuit breaker trips. Uploads are strictly sequential: the media
host rate-limits per caller, not per query.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..cache.result_cache import ResultCache, normalize_query
from ..config import GifSearchConfig
from ..domain.models import RENDITION_COMPACT, ItemMetadataDigest, MediaItem
from ..exceptions import ProviderError, UploadError
from ..hosting.uploader import RehostUploader
from ..media.normalizer import normalize_giphy_result
from ..media.similarity import SimilarityDetector, build_digest, identity_key
from ..providers.providers_base import SearchPage, SearchProvider
from .backoff import BackoffPolicy, CircuitBreaker, wrap_sleep


@dataclass(slots=True)
class _RunState:
    desired_count: int
    breaker: CircuitBreaker
    accepted: list[MediaItem] = field(default_factory=list)
    digests: list[ItemMetadataDigest] = field(default_factory=list)
    processed: set[str] = field(default_factory=set)

    @property
    def satisfied(self) -> bool:
        return len(self.accepted) >= self.desired_count


class SearchPipeline:
    """Acquire up to ``desired_count`` hosted, mutually distinct items for a query."""

    def __init__(
        self,
        *,
        provider: SearchProvider,
        uploader: RehostUploader,
        cache: ResultCache,
        detector: SimilarityDetector | None = None,
        backoff: BackoffPolicy | None = None,
        page_size: int = 50,
        max_pages: int = 10,
        max_consecutive_failures: int = 3,
        inter_item_delay_seconds: float = 0.4,
        sleep: Callable[[float], Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._provider = provider
        self._uploader = uploader
        self._cache = cache
        self._detector = detector or SimilarityDetector()
        self._backoff = backoff or BackoffPolicy()
        self._page_size = page_size
        self._max_pages = max_pages
        self._max_consecutive_failures = max_consecutive_failures
        self._inter_item_delay = max(0.0, inter_item_delay_seconds)
        self._sleep = wrap_sleep(sleep)
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        config: GifSearchConfig,
        *,
        provider: SearchProvider,
        uploader: RehostUploader,
        cache: ResultCache,
        sleep: Callable[[float], Any] | None = None,
    ) -> "SearchPipeline":
        return cls(
            provider=provider,
            uploader=uploader,
            cache=cache,
            detector=SimilarityDetector(
                aspect_ratio_epsilon=config.aspect_ratio_epsilon,
                token_overlap_threshold=config.token_overlap_threshold,
            ),
            backoff=BackoffPolicy(
                base_seconds=config.backoff_base_seconds,
                cap_seconds=config.backoff_cap_seconds,
            ),
            page_size=config.page_size,
            max_pages=config.max_pages,
            max_consecutive_failures=config.max_consecutive_failures,
            inter_item_delay_seconds=config.inter_item_delay_seconds,
            sleep=sleep,
        )

    @property
    def cache(self) -> ResultCache:
        return self._cache

    async def cached_items(self, query: str) -> list[MediaItem] | None:
        """Unexpired cached items for ``query`` whose hosted url is still first-party.

        Returns ``None`` when nothing usable is cached.
        """

        cached = await self._cache.get_result_set(normalize_query(query))
        if cached is None or cached.is_expired(now=self._cache.now()):
            return None
        return [item for item in cached.items if self._uploader.is_first_party(item.hosted_url)]

    async def search(self, query: str, desired_count: int) -> list[MediaItem]:
        """Return at most ``desired_count`` items, each with a first-party ``hosted_url``.

        Provider failures, upload failures and cache failures shorten the
        result instead of raising.
        """

        normalized = normalize_query(query)
        if not normalized or desired_count < 1:
            return []

        cached = await self.cached_items(normalized)
        if cached is not None and len(cached) >= desired_count:
            self._logger.info(
                "gif_search.cache.hit",
                extra={"query": normalized, "cached": len(cached)},
            )
            return cached[:desired_count]

        state = _RunState(
            desired_count=desired_count,
            breaker=CircuitBreaker(threshold=self._max_consecutive_failures),
        )
        offset = 0
        for page_number in range(self._max_pages):
            try:
                page = await self._provider.search_page(
                    query.strip(), limit=self._page_size, offset=offset
                )
            except ProviderError as exc:
                self._logger.warning(
                    "gif_search.page.failed",
                    extra={"query": normalized, "offset": offset, "error": str(exc)},
                )
                break
            if not page.results:
                break

            self._logger.info(
                "gif_search.page.fetched",
                extra={
                    "query": normalized,
                    "page": page_number,
                    "results": len(page.results),
                    "total_count": page.total_count,
                },
            )
            await self._consume_page(query, page, state)
            if state.satisfied or state.breaker.is_open:
                break

            offset += self._page_size
            if page.total_count is not None and offset >= page.total_count:
                break

        if state.accepted:
            await self._cache.put_result_set(normalized, state.accepted)

        self._logger.info(
            "gif_search.run.finished",
            extra={
                "query": normalized,
                "accepted": len(state.accepted),
                "desired": desired_count,
                "circuit_open": state.breaker.is_open,
            },
        )
        return self._finalize(state.accepted, desired_count)

    async def _consume_page(self, query: str, page: SearchPage, state: _RunState) -> None:
        for raw in page.results:
            if state.satisfied:
                return

            item = normalize_giphy_result(raw, query.strip())
            key = identity_key(item)
            if key in state.processed:
                continue
            state.processed.add(key)

            if not await self._rehost(item):
                failures = state.breaker.record_failure()
                await self._sleep(self._backoff.delay(failures))
                if state.breaker.is_open:
                    self._logger.warning(
                        "gif_search.circuit.open",
                        extra={"query": normalize_query(query), "failures": failures},
                    )
                    return
                continue

            state.breaker.record_success()
            digest = build_digest(item)
            if self._detector.is_duplicate_digest(digest, state.digests):
                self._logger.debug(
                    "gif_search.item.duplicate",
                    extra={"media_id": item.id, "identity_key": digest.identity_key},
                )
                continue

            state.accepted.append(item)
            state.digests.append(digest)
            if not state.satisfied:
                await self._sleep(self._inter_item_delay)

    async def _rehost(self, item: MediaItem) -> bool:
        cached = await self._cache.get_item(item.id)
        if cached is not None and self._uploader.is_first_party(cached.hosted_url):
            item.hosted_url = cached.hosted_url
            return True

        try:
            item.hosted_url = await self._uploader.upload(item.rendition(RENDITION_COMPACT).url)
        except UploadError as exc:
            self._logger.info(
                "gif_search.upload.failed",
                extra={"media_id": item.id, "error": str(exc)},
            )
            return False

        await self._cache.put_item(item)
        return True

    def _finalize(self, items: list[MediaItem], desired_count: int) -> list[MediaItem]:
        hosted = [item for item in items if self._uploader.is_first_party(item.hosted_url)]
        return hosted[:desired_count]


__all__ = ["SearchPipeline"]
