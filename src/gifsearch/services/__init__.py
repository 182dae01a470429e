"""Pipeline, batch orchestration and the outbound search facade."""

from .backoff import BackoffPolicy, CircuitBreaker
from .batch import BatchSearchOrchestrator
from .gif_search import GifSearchService, build_gif_search_service
from .search_pipeline import SearchPipeline

__all__ = [
    "BackoffPolicy",
    "BatchSearchOrchestrator",
    "CircuitBreaker",
    "GifSearchService",
    "SearchPipeline",
    "build_gif_search_service",
]
