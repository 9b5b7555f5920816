"""Database configuration and session management.

This module configures the SQLModel engine the booking listing queries run
against. The listing fans out several read-only queries at once, each on its
own session, so the engine (and its connection pool) is what gets shared
between them, never a session.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while writing.
      The listing issues up to seven reads in parallel; with rollback journals
      a concurrent writer would block all of them.

    - **Foreign Keys**: SQLite has foreign key support but it's disabled by
      default for backwards compatibility. We enable it to ensure referential
      integrity (e.g., an Attendee must reference an existing Booking).

    - **check_same_thread=False**: Queries are executed on worker threads, so
      a pooled connection may be used by a thread other than the one that
      opened it.
"""

from sqlalchemy import Engine
from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine

from bookingscope.core.config import settings


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, applying SQLite connection settings when needed."""
    connect_args = {"check_same_thread": False} if _is_sqlite(url) else {}
    new_engine = create_engine(url, connect_args=connect_args, echo=echo)

    if _is_sqlite(url):
        sa_event.listen(new_engine, "connect", set_sqlite_pragma)

    return new_engine


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(settings.database_url, echo=settings.debug)


def create_db_and_tables(target: Engine = engine):
    """Create all database tables."""
    SQLModel.metadata.create_all(target)


def get_engine() -> Engine:
    """Dependency for getting the shared engine (used for parallel reads)."""
    return engine


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session
