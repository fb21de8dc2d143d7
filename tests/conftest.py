"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from poolscore.core.config import Settings
from poolscore.db.database import create_db_engine, create_session_factory
from poolscore.db.schema import Base
from poolscore.db.sql_repository import SQLScoreStore
from poolscore.main import create_app

# Setup an in-memory SQLite database for testing (one shared connection, foreign keys enforced)
DATABASE_URL = "sqlite:///:memory:"
engine = create_db_engine(DATABASE_URL)

TestingSessionLocal = create_session_factory(engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Connection to a test database. Tables are removed at teardown to keep tests independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_store(session_factory: sessionmaker[Session]) -> SQLScoreStore:
    return SQLScoreStore(session_factory)


@pytest.fixture
def client(sql_store: SQLScoreStore) -> Generator[TestClient, None, None]:
    """HTTP client for an app wired to the test database."""
    app = create_app(settings=Settings(database_url=None, database_key=None), store=sql_store)
    with TestClient(app) as test_client:
        yield test_client
