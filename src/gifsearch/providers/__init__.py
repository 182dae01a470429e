"""Media-search provider adapters."""

from .providers_base import SearchPage, SearchProvider
from .providers_giphy import GiphyProvider

__all__ = ["GiphyProvider", "SearchPage", "SearchProvider"]
