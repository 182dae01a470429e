"""GIF acquisition core: search, dedup, re-host and cache provider media."""

from .config import GifSearchConfig
from .domain import MediaItem, Rendition
from .services import GifSearchService, build_gif_search_service

__all__ = [
    "GifSearchConfig",
    "GifSearchService",
    "MediaItem",
    "Rendition",
    "build_gif_search_service",
]
