"""Result-set and hosted-item caching."""

from .cache_base import KeyValueCache
from .memory import InMemoryCache
from .result_cache import ResultCache, normalize_query
from .sql import SqlCache

__all__ = ["InMemoryCache", "KeyValueCache", "ResultCache", "SqlCache", "normalize_query"]
