"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- Mocked statistics client
- Sample data factories (users, categories, events, requests)
- FastAPI test client
"""

import os
import pytest
from datetime import datetime, timedelta
from unittest.mock import Mock
from sqlalchemy.orm import sessionmaker

# Set test environment variables before importing app modules
os.environ['EWM_DB_URL'] = 'sqlite:///:memory:'
os.environ['EWM_STATS_SERVER_URL'] = 'http://stats.test:9090'

from backend.src.models import (
    Base,
    Category,
    Event,
    EventState,
    Location,
    ParticipationRequest,
    RequestStatus,
    User,
)
from backend.src.clients.stats_client import StatsClient
from backend.src.config.settings import AppSettings
from backend.src.db.database import create_db_engine
from backend.src.utils.event_locks import EventLockRegistry


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_db_engine('sqlite:///:memory:')
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Utility Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_settings():
    """Application settings with defaults (ownership enforced)."""
    return AppSettings(EWM_STATS_SERVER_URL='http://stats.test:9090')


@pytest.fixture(scope='function')
def test_locks():
    """A fresh per-event lock registry."""
    return EventLockRegistry()


@pytest.fixture(scope='function')
def mock_stats_client():
    """StatsClient mock that accepts hits and reports no statistics."""
    client = Mock(spec=StatsClient)
    client.add_hit.return_value = None
    client.find_stats.return_value = []
    return client


# ============================================================================
# Sample Data Factories
# ============================================================================

@pytest.fixture
def sample_user(test_db_session):
    """Factory for creating sample User models in the database."""
    counter = {'n': 0}

    def _create(name=None, email=None):
        counter['n'] += 1
        user = User(
            name=name or f"User {counter['n']}",
            email=email or f"user{counter['n']}@example.com",
        )
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)
        return user
    return _create


@pytest.fixture
def sample_category(test_db_session):
    """Factory for creating sample Category models in the database."""
    counter = {'n': 0}

    def _create(name=None):
        counter['n'] += 1
        category = Category(name=name or f"Category {counter['n']}")
        test_db_session.add(category)
        test_db_session.commit()
        test_db_session.refresh(category)
        return category
    return _create


@pytest.fixture
def sample_event(test_db_session, sample_user, sample_category):
    """
    Factory for creating sample Event models in the database.

    Events are PUBLISHED and a week ahead unless told otherwise.
    """
    def _create(
        initiator=None,
        category=None,
        title='Jazz night',
        annotation='An evening of live jazz standards',
        description='Three sets of jazz standards with a guest trio',
        event_date=None,
        state=EventState.PUBLISHED,
        paid=False,
        participant_limit=0,
        request_moderation=True,
        confirmed_requests=0,
        views=0,
    ):
        event = Event(
            title=title,
            annotation=annotation,
            description=description,
            category=category or sample_category(),
            initiator=initiator or sample_user(),
            location=Location(lat=55.75, lon=37.61),
            event_date=event_date or datetime.utcnow() + timedelta(days=7),
            created_on=datetime.utcnow(),
            published_on=datetime.utcnow() if state == EventState.PUBLISHED else None,
            paid=paid,
            participant_limit=participant_limit,
            request_moderation=request_moderation,
            confirmed_requests=confirmed_requests,
            views=views,
            state=state,
        )
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)
        return event
    return _create


@pytest.fixture
def sample_request(test_db_session, sample_user):
    """Factory for creating ParticipationRequest rows in the database."""
    def _create(event, requester=None, status=RequestStatus.PENDING):
        request = ParticipationRequest(
            event_id=event.id,
            requester_id=(requester or sample_user()).id,
            created=datetime.utcnow(),
            status=status,
        )
        test_db_session.add(request)
        test_db_session.commit()
        test_db_session.refresh(request)
        return request
    return _create


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_client(test_db_session, mock_stats_client, test_settings):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.main import app

    # Override dependencies
    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    from backend.src.db.database import get_db
    from backend.src.clients.stats_client import get_stats_client
    from backend.src.config.settings import get_settings

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_stats_client] = lambda: mock_stats_client
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
