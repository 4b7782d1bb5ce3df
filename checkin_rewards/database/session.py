"""
Engine and session management for the rewards store.

The database URL comes from config.env (PostgreSQL via CHECKIN_DB_URL /
DATABASE_URL, otherwise a SQLite file). The engine is built on first use and
kept for the life of the process; tests swap it with reset_engine_for_test().
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from checkin_rewards.config.env import get_database_url, mask_url
from checkin_rewards.database.models import Base
from checkin_rewards.rewards_logging import get_logger

logger = get_logger(__name__)

# Concurrent check-ins on SQLite wait for the writer instead of failing at once
SQLITE_BUSY_TIMEOUT_MS = 5000


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
    cursor.close()


class _Store:
    """Lazily built engine plus its session factory."""

    def __init__(self) -> None:
        self.engine: Engine | None = None
        self.factory: sessionmaker | None = None

    def build(self) -> sessionmaker:
        if self.factory is not None:
            return self.factory
        url = get_database_url()
        if url.startswith("sqlite"):
            engine = create_engine(url, connect_args={"check_same_thread": False})
            event.listen(engine, "connect", _sqlite_pragmas)
        else:
            engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)
        self.engine = engine
        self.factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info("database_engine_created", url=mask_url(url), dialect=engine.dialect.name)
        return self.factory

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.factory = None


_store = _Store()


def get_engine() -> Engine:
    _store.build()
    return _store.engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """One unit of work: commit when the block exits cleanly, roll back on error."""
    session = _store.build()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create players and points_activities if missing. Idempotent; run at startup."""
    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("database_init", tables=sorted(Base.metadata.tables))


def reset_engine_for_test() -> None:
    """Drop the cached engine so the next call re-reads the database URL."""
    _store.dispose()
