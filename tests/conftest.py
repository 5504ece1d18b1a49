"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing the persistence layer.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def db_session_pair() -> Generator[tuple[Session, Session], None, None]:
    """Two sessions on the same database tables. Mock real setup with two requests for the same game handled side by side."""
    Base.metadata.create_all(bind=engine)
    first, second = TestingSessionLocal(), TestingSessionLocal()
    try:
        yield first, second
    finally:
        first.close()
        second.close()
        Base.metadata.drop_all(bind=engine)
