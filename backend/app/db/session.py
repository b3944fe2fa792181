"""
SQLAlchemy engine and session factory for Postgres + pgvector (SQLite for tests).
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import get_settings

Base = declarative_base()

_engine = None
_SessionLocal = None


def build_engine(database_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    if database_url.startswith("sqlite"):
        return create_engine(database_url, echo=False)
    return create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=False,
    )


def get_engine():
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = build_engine(
            settings.database_url,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
        )
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def init_db(engine: Engine) -> None:
    """Create all tables (development and tests; production uses migrations/)."""
    # Register every model on Base.metadata before create_all
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """One unit of work: commit on success, rollback on error, always close."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """Context manager for a single request-scoped DB session."""
    with session_scope(get_session_factory()) as session:
        yield session


@contextmanager
def use_session(factory: sessionmaker, db: Session | None = None) -> Generator[Session, None, None]:
    """Join the caller's unit of work when `db` is given, else open a new one."""
    if db is not None:
        yield db
        return
    with session_scope(factory) as session:
        yield session
