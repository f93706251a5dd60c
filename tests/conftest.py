"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Each test gets a fresh schema that is
dropped after the test, so no test data persists.
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from finance_ledger.api.deps import get_clock
from finance_ledger.main import app
from finance_ledger.models.base import Base, build_engine, get_db


# Use SQLite for tests: no external database needed.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = build_engine(TEST_DATABASE_URL)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# A Monday. Dates in the tests are chosen relative to this.
FIXED_NOW = datetime(2024, 1, 15, 10, 30)


@pytest.fixture(autouse=True)
def setup_database():
    """
    Create all tables before each test, drop them after.

    autouse=True means every test gets this automatically.
    This ensures each test starts with a clean database.
    """
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def other_session():
    """
    A second, independent session on the same database.

    Stands in for a concurrent request: it has its own connection
    and its own identity map.
    """
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def clock():
    """A clock that always reads FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def client(db_session, clock):
    """
    Provide a test client with the test database and fixed clock.

    We override the get_db and get_clock dependencies so the
    FastAPI app uses our test session and time instead of the
    real ones.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()
