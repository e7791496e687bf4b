"""Pytest fixtures for the CSR Project Tracker tests.

This module provides fixtures for setting up the test database, the
application context and table stores. The SQLAlchemy-backed app uses an
in-memory SQLite database to ensure test isolation; most service tests run
against the in-process MemoryStore.
"""
import pytest

from app import create_app, db
from app.config import Config
from app.services import ServiceRegistry
from app.store import MemoryStore, StoreError, TableStore


class TestConfig(Config):
    """Test configuration using in-memory SQLite database.

    This ensures tests are isolated from development data and run quickly.
    """
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    DATA_STORE = 'sqlalchemy'
    LOG_LEVEL = 'DEBUG'


class FailingStore(TableStore):
    """Table store whose every call fails like an unreachable backend."""

    def __init__(self):
        self.calls = 0

    def _fail(self, *args, **kwargs):
        self.calls += 1
        try:
            raise ConnectionError('backend unreachable')
        except ConnectionError as exc:
            raise StoreError('Failed to reach the data store') from exc

    select = _fail
    count = _fail
    insert = _fail
    update = _fail
    delete = _fail


@pytest.fixture(scope='function')
def app():
    """Create a test application backed by in-memory SQLite.

    Tables are created fresh for each test function.

    Yields:
        Flask application configured for testing.
    """
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client for the database-backed application."""
    return app.test_client()


@pytest.fixture
def store():
    """Provide an empty in-process table store."""
    return MemoryStore()


@pytest.fixture
def services(store):
    """Every service wired to the in-process store."""
    return ServiceRegistry(store, {'UPCOMING_EVENT_DAYS': 30})


@pytest.fixture
def failing_store():
    """Provide a store whose every operation raises StoreError."""
    return FailingStore()


@pytest.fixture
def memory_app(store):
    """Application serving from the in-process store (no database needed)."""
    app = create_app(TestConfig, store=store)
    with app.app_context():
        yield app


@pytest.fixture
def memory_client(memory_app):
    return memory_app.test_client()


@pytest.fixture
def failing_client(failing_store):
    """Test client for an application whose store always fails."""
    app = create_app(TestConfig, store=failing_store)
    with app.app_context():
        yield app.test_client()


@pytest.fixture
def sample_partner(services):
    return services.partners.create_partner({
        'company_name': 'Tata Steel Foundation',
        'city': 'Jamshedpur',
        'state': 'Jharkhand',
    })


@pytest.fixture
def sample_project(services, sample_partner):
    """Create and return an active project funded by sample_partner."""
    return services.projects.create_project({
        'project_code': 'PRJ-001',
        'name': 'Digital Literacy Centres',
        'description': 'Computer labs in rural schools',
        'csr_partner_id': sample_partner['id'],
        'status': 'active',
        'start_date': '2026-01-10',
        'expected_end_date': '2026-12-31',
        'total_budget': 1000000,
        'utilized_budget': 0,
        'completion_percentage': 0,
        'metadata': {'students_enrolled_current': 120, 'students_enrolled_target': 500},
    })
