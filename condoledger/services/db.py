"""Database engine, session factory and unit-of-work helpers.

Nothing here is a module-level singleton: callers build an engine and a
session factory from settings and hand the factory to each service.
"""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from condoledger.models import Base
from condoledger.services.config import Settings
from condoledger.services.errors import StorageFailureError

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database.

    SQLite gets ``check_same_thread=False`` and a generous busy timeout so
    that concurrent writers wait for the lock instead of failing. The
    in-memory database uses StaticPool so every session sees the same data.
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            return create_engine(
                url,
                echo=settings.database_echo,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        return create_engine(url, echo=settings.database_echo, connect_args=connect_args)
    return create_engine(url, echo=settings.database_echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to ``engine``."""
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables (development and tests; production uses Alembic)."""
    Base.metadata.create_all(engine)


@contextmanager
def unit_of_work(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits normally and rolls back on any exception.
    Database errors raised by the block or by the commit are re-raised as
    StorageFailureError; other exceptions propagate unchanged.

    Example:
        ```python
        with unit_of_work(session_factory) as session:
            session.add(posting)
            session.execute(balance_update)
        ```
    """
    session = session_factory()
    try:
        with session.begin():
            yield session
    except SQLAlchemyError as e:
        logger.error(f"Transaction rolled back: {e}")
        raise StorageFailureError(f"Could not commit transaction: {e}") from e
    finally:
        session.close()


@contextmanager
def read_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Open a session for read-only queries."""
    session = session_factory()
    try:
        yield session
    except SQLAlchemyError as e:
        logger.error(f"Query failed: {e}")
        raise StorageFailureError(f"Could not read from storage: {e}") from e
    finally:
        session.close()


__all__ = [
    "create_engine_from_settings",
    "create_session_factory",
    "init_db",
    "unit_of_work",
    "read_session",
]
