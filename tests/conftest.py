"""
pytest Fixtures for Library Catalog API Tests

This file contains shared fixtures used across all test files.

For database tests, every test function gets its own SQLite in-memory
engine with freshly created tables. The entity store commits after each
write, so a brand-new database per test is the simplest way to keep
tests isolated from each other.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REQUIRE_AUTH_FOR_WRITES"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import library_api.models  # noqa: F401 - registers tables with Base.metadata
from library_api.config import get_settings
from library_api.database import Database, get_db
from library_api.main import app
from library_api.models import Author, Book, User
from library_api.services.security import create_access_token, hash_password
from library_api.services.store import EntityStore

TEST_PASSWORD = "salainen"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps a single connection alive; without it the in-memory
    database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    database.create_tables()

    yield engine

    database.drop_tables()
    database.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Create a session bound to the per-test database."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture
def store(db_session: Session) -> EntityStore:
    """Entity store over the test session."""
    return EntityStore(db_session)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency so the GraphQL context (and every
    resolver behind it) uses our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def open_writes(client: TestClient) -> TestClient:
    """Client whose settings let addBook/editAuthor run without login."""
    settings = get_settings().model_copy(update={"require_auth_for_writes": False})
    app.dependency_overrides[get_settings] = lambda: settings
    return client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_user(store: EntityStore) -> User:
    """Create a sample user whose password is TEST_PASSWORD."""
    return store.create_user(
        username="mluukkai",
        favourite_genre="refactoring",
        password_hash=hash_password(TEST_PASSWORD),
    )


@pytest.fixture
def auth_token(sample_user: User) -> str:
    """A valid bearer token for sample_user."""
    return create_access_token(
        {"sub": str(sample_user.id), "username": sample_user.username}
    )


@pytest.fixture
def sample_author(store: EntityStore) -> Author:
    """Create a sample author for testing."""
    return store.create_author("Robert Martin", born=1952)


@pytest.fixture
def sample_books(store: EntityStore, sample_author: Author) -> list[Book]:
    """
    A small catalog spread over three authors and overlapping genres.

    Robert Martin: Clean Code (refactoring),
                   Agile software development (agile, patterns, design)
    Martin Fowler: Refactoring, edition 2 (refactoring)
    Fyodor Dostoevsky: Crime and punishment (classic, crime)
    """
    fowler = store.create_author("Martin Fowler")
    dostoevsky = store.create_author("Fyodor Dostoevsky", born=1821)

    return [
        store.create_book("Clean Code", 2008, sample_author, ["refactoring"]),
        store.create_book(
            "Agile software development",
            2002,
            sample_author,
            ["agile", "patterns", "design"],
        ),
        store.create_book("Refactoring, edition 2", 2018, fowler, ["refactoring"]),
        store.create_book("Crime and punishment", 1866, dostoevsky, ["classic", "crime"]),
    ]
