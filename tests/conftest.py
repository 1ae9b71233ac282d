"""Shared fixtures: in-memory SQLite database, session and HTTP client."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from member_search.api.deps import get_db
from member_search.db.base import Base
from member_search.main import app
from member_search.models.member import Member
from member_search.services.team_service import seed_sample_data


@pytest.fixture
def engine():
    # StaticPool keeps one connection so the in-memory database survives across sessions/threads
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def session(session_factory) -> Session:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def members(session: Session) -> list[Member]:
    """TeamA: Member1 (10), Member2 (20); TeamB: Member3 (30), Member4 (40)."""
    return seed_sample_data(session)


@pytest.fixture
def client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
