"""Pytest fixtures and configuration for jobhunter tests."""

import os

# Keep the app's module-level engine off the developer's database file
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from jobhunter.database.database import Base
from jobhunter.database.kv_store import InMemoryKeyValueStore, SqlKeyValueStore
from jobhunter.database.state_repository import StateRepository
from jobhunter.models.constants import DEFAULT_TASKS
from jobhunter.services.tracker import TrackerSession


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Monday; the week key for this day is Sunday 2023-12-31
MONDAY = datetime(2024, 1, 1, 9, 30)


class FakeClock:
    """Callable clock that tests can move forward or backward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.now = self.now + timedelta(days=days, hours=hours)

    def set(self, now: datetime) -> None:
        self.now = now


@pytest.fixture
def clock():
    """Clock fixed at Monday 2024-01-01 09:30 local time."""
    return FakeClock(MONDAY)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory SQLite session for each test."""
    from jobhunter.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def repository(memory_store):
    """StateRepository over an in-memory key-value store."""
    return StateRepository(memory_store)


@pytest.fixture
def sql_repository(db_session: Session):
    """StateRepository over the kv_entries table."""
    return StateRepository(SqlKeyValueStore(db_session))


@pytest.fixture
def tracker(repository, clock):
    """A freshly loaded tracker with the default tasks."""
    return TrackerSession.load(repository, DEFAULT_TASKS, clock)


@pytest.fixture
def reload(repository, clock):
    """Return a function that loads a new session from the same storage."""
    def _reload() -> TrackerSession:
        return TrackerSession.load(repository, DEFAULT_TASKS, clock)
    return _reload


@pytest.fixture
def api_app(db_session: Session, clock):
    """The FastAPI app wired to the test database and the fake clock."""
    from jobhunter.api.app import app, get_clock, get_kv_store

    app.dependency_overrides[get_kv_store] = lambda: SqlKeyValueStore(db_session)
    app.dependency_overrides[get_clock] = lambda: clock
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(api_app):
    """FastAPI test client; entering it runs the app lifespan."""
    with TestClient(api_app) as client:
        yield client
