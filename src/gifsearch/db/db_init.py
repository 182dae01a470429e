"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db_models import Base


def init_db(engine: Engine) -> None:
    """Create the cache tables if they are missing."""
    Base.metadata.create_all(engine)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Build an engine for ``database_url``, create tables and return a session factory."""
    engine = create_engine(database_url, future=True)
    init_db(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
