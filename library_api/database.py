"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 for the Library Catalog API.

Connection Lifecycle
====================
There is no module-level engine. The application builds one explicit
Database object at startup (see main.lifespan), stores it on app.state,
and disposes it on shutdown. Everything else receives sessions through
dependency injection, so tests can swap the whole store for an in-memory
SQLite database without touching globals.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → get_db opens a new session
2. The entity store uses that session for every read/write of the request
3. Each write commits on success, rolls back on failure
4. The session is closed when the request ends
"""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


def create_db_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured store.

    Key parameters:
    - pool_size / max_overflow: connection pool sizing (not used by SQLite)
    - pool_pre_ping: test connection health before using it
    - echo: log all SQL statements in debug mode
    """
    if settings.is_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )

    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug,
    )


class Database:
    """
    Owns the engine and session factory for the lifetime of the app.

    Usage:
        database = Database.from_settings(get_settings())
        with database.session() as db:
            ...
        database.dispose()
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        # autocommit=False: the entity store decides when to commit
        # autoflush=False: no implicit flush before queries
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(create_db_engine(settings))

    def session(self) -> Session:
        """Open a new session bound to this database."""
        return self.session_factory()

    def create_tables(self) -> None:
        """
        Create all database tables.

        WARNING: In production, use Alembic migrations instead!
        """
        # Models must be imported so they register with Base.metadata
        import library_api.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        """
        Drop all database tables.

        DANGER: This deletes all data! Only use in development and tests.
        """
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()


# =============================================================================
# Dependency Injection
# =============================================================================
def get_database(request: Request) -> Database:
    """Return the Database object created by the application lifespan."""
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield opens the session, code after yield closes it, and
    the finally block makes sure cleanup happens even if an exception
    occurs. Tests override this dependency to inject their own session.

    Yields:
        SQLAlchemy Session instance
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
