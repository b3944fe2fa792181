"""Shared fixtures: in-memory SQLite with fresh tables per test."""
from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.session import init_db
from app.services.container import build_services


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", embedding_dim=None)


@pytest.fixture
def services(settings, session_factory):
    return build_services(settings, session_factory)


@pytest.fixture
def features(services):
    return services.features


@pytest.fixture
def vectors(services):
    return services.vectors


@pytest.fixture
def preferences(services):
    return services.preferences


@pytest.fixture
def scoring(services):
    return services.scoring


@pytest.fixture
def processor(services):
    return services.feedback
