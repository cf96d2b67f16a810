"""MyContacts - Database engine, session management and database container.

SQLAlchemy sync engine/session factory for SQLite, plus ContactsDatabase:
the handle that owns one engine and hands out DAOs bound to it.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mycontacts.config import DATABASE_VERSION, DB_PATH
from mycontacts.models import Base

if TYPE_CHECKING:
    from mycontacts.dao import ContactsDao

logger = logging.getLogger(__name__)

# Sentinel path selecting a private in-memory database
IN_MEMORY = ":memory:"


class SchemaVersionMismatch(Exception):
    """Raised when an existing database carries a different schema version.

    No migrations exist, so opening such a file is a hard error.
    Error code: SCHEMA_VERSION_MISMATCH
    """

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"SCHEMA_VERSION_MISMATCH: database has user_version {found}, "
            f"expected {expected} (no migration available)"
        )


def get_database_url(db_path: str | Path | None = None) -> str:
    """Get SQLite database URL.

    Args:
        db_path: Optional path override. Defaults to config.DB_PATH.
            IN_MEMORY selects a private in-memory database.

    Returns:
        SQLite connection URL string.
    """
    path = db_path if db_path is not None else DB_PATH
    if str(path) == IN_MEMORY:
        return "sqlite://"
    return f"sqlite:///{path}"


def create_db_engine(db_path: str | Path | None = None, echo: bool = False) -> Engine:
    """Create SQLAlchemy engine.

    Args:
        db_path: Optional path override for the database file.
        echo: If True, log all SQL statements.

    Returns:
        SQLAlchemy Engine instance.
    """
    url = get_database_url(db_path)
    # check_same_thread=False: DAO calls run on executor threads, one session
    # per unit of work, never shared across threads.
    kwargs: dict = {"echo": echo, "connect_args": {"check_same_thread": False}}
    in_memory = url == "sqlite://"
    if in_memory:
        # An in-memory database lives only as long as its connection, so every
        # session must reuse the same one.
        kwargs["poolclass"] = StaticPool
    else:
        Path(str(db_path if db_path is not None else DB_PATH)).parent.mkdir(
            parents=True, exist_ok=True
        )
    engine = create_engine(url, **kwargs)
    if in_memory:
        _serialize_checkouts(engine)
    return engine


def _serialize_checkouts(engine: Engine) -> None:
    """Allow only one checkout of the engine's connection at a time.

    StaticPool hands the same sqlite3 connection to every session, so sessions
    running on different executor threads take turns: the lock is acquired on
    pool checkout and released on checkin (after the session closes).
    """
    lock = threading.RLock()

    @event.listens_for(engine, "checkout")
    def _acquire(dbapi_connection, connection_record, connection_proxy):
        lock.acquire()

    @event.listens_for(engine, "checkin")
    def _release(dbapi_connection, connection_record):
        lock.release()


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the given engine.

    Args:
        engine: SQLAlchemy Engine instance.

    Returns:
        Configured sessionmaker.
    """
    # - autoflush=False: explicit flush control
    # - expire_on_commit=False: returned contacts stay readable after the
    #   session that loaded them is closed
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def _stamp_schema_version(engine: Engine) -> None:
    """Record DATABASE_VERSION in PRAGMA user_version, or verify it matches.

    Raises:
        SchemaVersionMismatch: If the database was stamped with another version.
    """
    with engine.begin() as conn:
        found = conn.exec_driver_sql("PRAGMA user_version").scalar() or 0
        if found == 0:
            conn.exec_driver_sql(f"PRAGMA user_version = {int(DATABASE_VERSION)}")
        elif found != DATABASE_VERSION:
            raise SchemaVersionMismatch(found, DATABASE_VERSION)


def init_db(db_path: str | Path | None = None, echo: bool = False) -> tuple[Engine, sessionmaker]:
    """Initialize the database: create engine, session factory, and all tables.

    This is idempotent - safe to call multiple times on the same file.

    Args:
        db_path: Optional path override for the database file.
        echo: If True, log all SQL statements.

    Returns:
        Tuple of (engine, SessionFactory).

    Raises:
        SchemaVersionMismatch: If an existing file has a different schema version.
    """
    engine = create_db_engine(db_path, echo=echo)
    SessionFactory = create_session_factory(engine)

    try:
        # Create all tables (idempotent via checkfirst=True default)
        Base.metadata.create_all(engine)
        _stamp_schema_version(engine)
    except Exception:
        engine.dispose()
        raise

    return engine, SessionFactory


# --- Database Container ---


class ContactsDatabase:
    """Contacts database to store and access user contacts.

    Construct explicitly with build() or in_memory() and pass the handle to
    consumers, or use get_instance() for the lazily built process-wide one.
    """

    _instance: ContactsDatabase | None = None
    _lock = threading.Lock()

    def __init__(self, engine: Engine, session_factory: sessionmaker):
        self.engine = engine
        self.session_factory = session_factory

    @classmethod
    def build(cls, db_path: str | Path | None = None, echo: bool = False) -> ContactsDatabase:
        """Open (creating if needed) the database at db_path."""
        engine, SessionFactory = init_db(db_path, echo=echo)
        logger.info("Opened contacts database at %s", engine.url)
        return cls(engine, SessionFactory)

    @classmethod
    def in_memory(cls) -> ContactsDatabase:
        """Build an isolated in-memory database, discarded on close()."""
        return cls.build(IN_MEMORY)

    @classmethod
    def get_instance(cls, db_path: str | Path | None = None) -> ContactsDatabase:
        """Return the process-wide database, building it on first access.

        Double-checked locking: the unlocked read serves the common case and
        the locked re-check guarantees a single build under concurrent first
        access. db_path is only consulted by the call that builds.
        """
        instance = cls._instance
        if instance is not None:
            return instance
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls.build(db_path)
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Close and forget the process-wide database (test harnesses only)."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.close()
                cls._instance = None

    def contacts_dao(self) -> ContactsDao:
        """Return a DAO bound to this database."""
        # Local import to avoid circular import (dao -> models, db -> dao).
        from mycontacts.dao import ContactsDao

        return ContactsDao(self.session_factory)

    def schema_version(self) -> int:
        """Return the schema version stored in the database file."""
        with self.engine.connect() as conn:
            return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)

    def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        self.engine.dispose()
