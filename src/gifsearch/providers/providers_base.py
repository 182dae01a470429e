"""Abstract search provider definition."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class SearchPage:
    """One page of raw provider results."""

    results: list[dict[str, Any]] = field(default_factory=list)
    offset: int = 0
    total_count: int | None = None


class SearchProvider(ABC):
    """Base interface for media-search providers."""

    @abstractmethod
    async def search_page(self, query: str, *, limit: int, offset: int) -> SearchPage:
        """Fetch raw results for ``query`` starting at ``offset``."""
