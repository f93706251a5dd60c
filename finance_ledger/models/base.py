"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().

Which store backs the ledger is decided here, once, from the
database URL. Nothing else in the package knows or cares
whether it is talking to SQLite or PostgreSQL.
"""

import uuid

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from finance_ledger.config import get_settings

settings = get_settings()


def new_id() -> str:
    """Default primary key for records whose id the caller did not supply."""
    return str(uuid.uuid4())


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, timeout: float | None = None) -> Engine:
    """
    Create an engine for the given store.

    Every wait on the store is bounded by `timeout` seconds:
    SQLite's busy timeout, PostgreSQL's connect, statement and
    lock timeouts, and the pool checkout timeout. A wait that
    runs out raises instead of blocking forever.
    """
    if timeout is None:
        timeout = settings.STORE_TIMEOUT_SECONDS

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    timeout_ms = int(timeout * 1000)
    # pool_pre_ping=True tests connections before using them,
    # which handles cases where the database restarted or a
    # connection went stale.
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_timeout=timeout,
        connect_args={
            "connect_timeout": max(1, int(timeout)),
            "options": (
                f"-c statement_timeout={timeout_ms} "
                f"-c lock_timeout={timeout_ms}"
            ),
        },
    )


# --- Engine ---
engine = build_engine(settings.DATABASE_URL)

# --- Session Factory ---
# autocommit=False means we explicitly control when changes
# are saved: every service mutator commits exactly once, at
# the end of its atomic unit.
# autoflush=False means SQLAlchemy won't send SQL to the
# database until we explicitly flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


# --- Base Model Class ---
class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
