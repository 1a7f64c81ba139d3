"""
Pytest configuration and fixtures for statistics service tests.

Provides shared fixtures for:
- Test database sessions
- Hit factory
- FastAPI test client
"""

import os
import pytest
from datetime import datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['STATS_DB_URL'] = 'sqlite:///:memory:'

from stats.src.models import Base, Hit


@pytest.fixture(scope='function')
def stats_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def stats_db_session(stats_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=stats_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sample_hit(stats_db_session):
    """Factory for creating Hit rows in the database."""
    def _create(uri='/events/1', ip='10.0.0.1', app='ewm-service',
                timestamp=datetime(2026, 3, 1, 12, 0, 0)):
        hit = Hit(app=app, uri=uri, ip=ip, timestamp=timestamp)
        stats_db_session.add(hit)
        stats_db_session.commit()
        return hit
    return _create


@pytest.fixture(scope='function')
def stats_client(stats_db_session):
    """Create a test client for the statistics application."""
    from fastapi.testclient import TestClient
    from stats.src.main import app
    from stats.src.db.database import get_db

    def get_test_db():
        yield stats_db_session

    app.dependency_overrides[get_db] = get_test_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
