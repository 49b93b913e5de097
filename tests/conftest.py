"""
Pytest fixtures for testing
"""
import pytest
from datetime import datetime
from sqlalchemy.orm import sessionmaker, Session

from dailytodo.domain.calendar import DayCalendar
from dailytodo.infrastructure.db.session import Base, make_engine
from dailytodo.infrastructure.db import models  # noqa: F401


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across connections (API tests use threads)."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def calendar():
    """Fixed calendar with a DST shift (Europe/Berlin)."""
    return DayCalendar("Europe/Berlin")


@pytest.fixture
def now(calendar):
    """Saturday 2026-01-24 14:00 local time."""
    return datetime(2026, 1, 24, 14, 0, tzinfo=calendar.tz)
