"""Persistence for the durable cache store."""

from .db_init import create_session_factory, init_db
from .db_models import Base, CacheEntryModel

__all__ = ["Base", "CacheEntryModel", "create_session_factory", "init_db"]
