"""Fan several queries out to concurrent single-query pipelines."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable

from ..cache.result_cache import normalize_query
from ..config import GifSearchConfig
from ..domain.models import MediaItem
from .backoff import wrap_sleep
from .search_pipeline import SearchPipeline

ResultCallback = Callable[[str, list[MediaItem]], None]


class BatchSearchOrchestrator:
    """Run one pipeline per uncached query under a shared deadline.

    Pipeline starts are staggered by ``index * stagger_seconds`` so a batch does
    not hit the provider and the media host as a single burst. Pipelines still
    running at the deadline are abandoned, not cancelled; whatever they write to
    the cache afterwards serves later callers.
    """

    def __init__(
        self,
        *,
        pipeline: SearchPipeline,
        deadline_seconds: float = 30.0,
        stagger_seconds: float = 0.2,
        sleep: Callable[[float], Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")
        self._pipeline = pipeline
        self._deadline_seconds = deadline_seconds
        self._stagger_seconds = max(0.0, stagger_seconds)
        self._sleep = wrap_sleep(sleep)
        self._logger = logger or logging.getLogger(__name__)
        self._abandoned: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(
        cls,
        config: GifSearchConfig,
        *,
        pipeline: SearchPipeline,
        sleep: Callable[[float], Any] | None = None,
    ) -> "BatchSearchOrchestrator":
        return cls(
            pipeline=pipeline,
            deadline_seconds=config.batch_deadline_seconds,
            stagger_seconds=config.batch_stagger_seconds,
            sleep=sleep,
        )

    @property
    def abandoned_tasks(self) -> frozenset[asyncio.Task[None]]:
        return frozenset(self._abandoned)

    async def search_many(
        self,
        queries: Iterable[str],
        limit: int,
        on_result: ResultCallback | None = None,
    ) -> dict[str, list[MediaItem]]:
        """Return a mapping of each requested query to its hosted items.

        Queries differing only by case or surrounding whitespace share one
        pipeline run and one result list. Missing results map to ``[]``.
        """

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._deadline_seconds

        groups: dict[str, list[str]] = {}
        for query in queries:
            if not query or not query.strip():
                continue
            spellings = groups.setdefault(normalize_query(query), [])
            if query not in spellings:
                spellings.append(query)
        if not groups:
            return {}

        resolved: dict[str, list[MediaItem]] = {}
        expired = False

        def resolve(normalized: str, items: list[MediaItem]) -> None:
            if expired:
                return
            resolved[normalized] = items
            if on_result is not None:
                for spelling in groups[normalized]:
                    self._notify(on_result, spelling, items)

        pending: list[str] = []
        for normalized in groups:
            cached = await self._pipeline.cached_items(normalized)
            if cached is not None and len(cached) >= limit:
                resolve(normalized, cached[:limit])
            else:
                pending.append(normalized)

        self._logger.info(
            "gif_search.batch.start",
            extra={"queries": len(groups), "cached": len(groups) - len(pending)},
        )

        tasks = [
            asyncio.create_task(
                self._run_pipeline(groups[normalized][0], normalized, index, limit, resolve)
            )
            for index, normalized in enumerate(pending)
        ]
        if tasks:
            remaining = max(0.0, deadline - loop.time())
            _, unfinished = await asyncio.wait(tasks, timeout=remaining)
            if unfinished:
                expired = True
                self._logger.warning(
                    "gif_search.batch.deadline_exceeded",
                    extra={"unfinished": len(unfinished), "deadline_seconds": self._deadline_seconds},
                )
                for task in unfinished:
                    self._abandoned.add(task)
                    task.add_done_callback(self._abandoned.discard)
                await self._fill_from_cache(groups, resolved, limit)

        return {
            spelling: list(resolved.get(normalized, []))
            for normalized, spellings in groups.items()
            for spelling in spellings
        }

    async def aclose(self) -> None:
        """Cancel pipelines abandoned by earlier deadlines."""

        if not self._abandoned:
            return
        tasks = list(self._abandoned)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._abandoned.clear()

    async def _run_pipeline(
        self,
        query: str,
        normalized: str,
        index: int,
        limit: int,
        resolve: Callable[[str, list[MediaItem]], None],
    ) -> None:
        await self._sleep(index * self._stagger_seconds)
        try:
            items = await self._pipeline.search(query, limit)
        except Exception:
            self._logger.exception("gif_search.batch.pipeline_failed", extra={"query": normalized})
            items = []
        resolve(normalized, items)

    def _notify(self, on_result: ResultCallback, query: str, items: list[MediaItem]) -> None:
        try:
            on_result(query, items)
        except Exception:
            self._logger.exception("gif_search.batch.callback_failed", extra={"query": query})

    async def _fill_from_cache(
        self,
        groups: dict[str, list[str]],
        resolved: dict[str, list[MediaItem]],
        limit: int,
    ) -> None:
        # late pipelines may have written their result set before the wait gave up
        for normalized in groups:
            if normalized in resolved:
                continue
            cached = await self._pipeline.cached_items(normalized)
            resolved[normalized] = cached[:limit] if cached else []


__all__ = ["BatchSearchOrchestrator", "ResultCallback"]
