"""GIPHY search provider implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..exceptions import ProviderError
from .providers_base import SearchPage, SearchProvider

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GiphyProvider(SearchProvider):
    """Query the GIPHY search endpoint one page at a time."""

    api_key: str | None
    api_url: str = "https://api.giphy.com/v1/gifs/search"
    rating: str = "g"
    timeout_seconds: float = 10.0
    log: logging.Logger = field(default_factory=lambda: logger)

    async def search_page(self, query: str, *, limit: int, offset: int) -> SearchPage:
        if not self.api_key:
            raise ProviderError("GIPHY api key is not configured")

        params = {
            "q": query,
            "api_key": self.api_key,
            "limit": limit,
            "offset": offset,
            "rating": self.rating,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(
                    self.api_url, params=params, headers={"Accept": "application/json"}
                )
        except httpx.HTTPError as exc:
            raise ProviderError(f"GIPHY HTTP error: {exc}") from exc

        if response.status_code != 200:
            self.log.warning(
                "giphy.search.error",
                extra={"status_code": response.status_code, "offset": offset},
            )
            raise ProviderError(f"GIPHY search failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError("GIPHY returned malformed JSON") from exc

        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise ProviderError("GIPHY response missing data list")

        results = [entry for entry in body["data"] if isinstance(entry, dict)]
        return SearchPage(
            results=results,
            offset=offset,
            total_count=_total_count(body.get("pagination")),
        )


def _total_count(pagination: Any) -> int | None:
    if not isinstance(pagination, dict):
        return None
    try:
        return int(pagination["total_count"])
    except (KeyError, TypeError, ValueError):
        return None
