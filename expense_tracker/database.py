"""Database configuration for the expense tracking backend."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings

LOG = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, _record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """Create an engine whose pool bounds the number of live connections.

    Checkouts beyond ``pool_size + max_overflow`` wait ``pool_timeout``
    seconds and then fail with :class:`sqlalchemy.exc.TimeoutError`.
    """

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                pool_size=settings.pool_size,
                max_overflow=settings.max_overflow,
                pool_timeout=settings.pool_timeout,
            )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        url,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,
    )


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create database tables if they do not already exist."""
    from . import models  # noqa: F401  # Import models for metadata registration

    Base.metadata.create_all(bind=engine)
    LOG.info("Database schema ready on %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency yielding a session from the application's own engine."""
    with session_scope(request.app.state.sessionmaker) as session:
        yield session
