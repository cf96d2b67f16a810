"""Tests for mycontacts.db module and the ContactsDatabase container."""

import threading
import time
from pathlib import Path
from unittest import mock

import pytest
from sqlalchemy import inspect, text

from mycontacts.config import DATABASE_VERSION
from mycontacts.db import (
    IN_MEMORY,
    ContactsDatabase,
    SchemaVersionMismatch,
    get_database_url,
    init_db,
)
from mycontacts.models import Contact


@pytest.fixture
def clean_instance():
    """Make sure no process-wide database leaks between tests."""
    ContactsDatabase.reset_instance()
    yield
    ContactsDatabase.reset_instance()


def memory_db() -> ContactsDatabase:
    """Build an in-memory database without going through ContactsDatabase.build."""
    return ContactsDatabase(*init_db(IN_MEMORY))


class TestGetDatabaseUrl:
    """Tests for URL construction."""

    def test_file_path(self, tmp_path):
        db_path = tmp_path / "contacts.db"
        assert get_database_url(db_path) == f"sqlite:///{db_path}"

    def test_in_memory(self):
        assert get_database_url(IN_MEMORY) == "sqlite://"

    def test_default_uses_config(self):
        with mock.patch("mycontacts.db.DB_PATH", Path("/tmp/x/contacts_database.db")):
            assert get_database_url() == "sqlite:////tmp/x/contacts_database.db"


class TestInitDb:
    """Tests for database initialization."""

    def test_creates_database_file(self, temp_db):
        """init_db should create the database file."""
        db_path, _, _ = temp_db
        assert db_path.exists()

    def test_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "contacts.db"
        engine, _ = init_db(db_path)
        try:
            assert db_path.exists()
        finally:
            engine.dispose()

    def test_creates_contacts_table(self, temp_db):
        """init_db should create the contacts table with the persisted layout."""
        _, engine, _ = temp_db

        inspector = inspect(engine)
        assert inspector.get_table_names() == ["contacts"]

        columns = {c["name"]: c for c in inspector.get_columns("contacts")}
        assert set(columns) == {"entryId", "name", "mobile"}
        assert {name: str(c["type"]) for name, c in columns.items()} == {
            "entryId": "TEXT",
            "name": "TEXT",
            "mobile": "TEXT",
        }
        assert inspector.get_pk_constraint("contacts")["constrained_columns"] == ["entryId"]
        assert inspector.get_indexes("contacts") == []

    def test_stamps_schema_version(self, temp_db):
        _, engine, _ = temp_db
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA user_version")).scalar() == DATABASE_VERSION

    def test_idempotent(self, temp_db):
        """init_db should be safe to call multiple times."""
        db_path, _, SessionFactory = temp_db

        with SessionFactory.begin() as session:
            session.add(Contact("kept", "1", "keep-me"))

        engine2, SessionFactory2 = init_db(db_path)
        try:
            with SessionFactory2() as session:
                assert session.get(Contact, "keep-me") is not None
        finally:
            engine2.dispose()

    def test_version_mismatch_raises(self, temp_db):
        """A file stamped with another version is rejected (no migrations)."""
        db_path, engine, _ = temp_db
        with engine.begin() as conn:
            conn.execute(text("PRAGMA user_version = 7"))

        with pytest.raises(SchemaVersionMismatch) as exc_info:
            init_db(db_path)

        exc = exc_info.value
        assert exc.found == 7
        assert exc.expected == DATABASE_VERSION
        assert "SCHEMA_VERSION_MISMATCH" in str(exc)


class TestContactsDatabase:
    """Tests for explicitly constructed databases."""

    def test_build_file_database(self, tmp_path):
        database = ContactsDatabase.build(tmp_path / "contacts.db")
        try:
            assert database.schema_version() == DATABASE_VERSION
            dao = database.contacts_dao()
            dao.insert_contact(Contact("a", "1", "A"))
            assert [c.id for c in dao.get_all_contacts()] == ["A"]
        finally:
            database.close()

    def test_file_database_persists_across_handles(self, tmp_path):
        db_path = tmp_path / "contacts.db"
        first = ContactsDatabase.build(db_path)
        first.contacts_dao().insert_contact(Contact("a", "1", "A"))
        first.close()

        second = ContactsDatabase.build(db_path)
        try:
            assert second.contacts_dao().get_contact_by_id("A") is not None
        finally:
            second.close()

    def test_in_memory_instances_are_isolated(self):
        first = ContactsDatabase.in_memory()
        second = ContactsDatabase.in_memory()
        try:
            first.contacts_dao().insert_contact(Contact("a", "1", "A"))
            assert len(first.contacts_dao().get_all_contacts()) == 1
            assert second.contacts_dao().get_all_contacts() == []
        finally:
            first.close()
            second.close()

    def test_in_memory_shared_across_sessions(self, database):
        """All sessions of one in-memory database see the same data."""
        database.contacts_dao().insert_contact(Contact("a", "1", "A"))
        assert database.contacts_dao().get_contact_by_id("A") is not None


class TestGetInstance:
    """Tests for the lazily built process-wide database."""

    def test_returns_same_instance(self, clean_instance):
        with mock.patch.object(ContactsDatabase, "build", side_effect=lambda p: memory_db()):
            first = ContactsDatabase.get_instance()
            second = ContactsDatabase.get_instance()
        assert first is second

    def test_later_arguments_ignored(self, clean_instance, tmp_path):
        first = ContactsDatabase.get_instance(tmp_path / "first.db")
        second = ContactsDatabase.get_instance(tmp_path / "second.db")
        assert first is second
        assert (tmp_path / "first.db").exists()
        assert not (tmp_path / "second.db").exists()

    def test_concurrent_first_access_builds_once(self, clean_instance):
        """Threads racing on first access all get the single built instance."""
        build_calls = []

        def slow_build(db_path):
            build_calls.append(db_path)
            time.sleep(0.05)
            return memory_db()

        n_threads = 8
        barrier = threading.Barrier(n_threads)
        results = []

        def worker():
            barrier.wait()
            results.append(ContactsDatabase.get_instance())

        with mock.patch.object(ContactsDatabase, "build", side_effect=slow_build):
            threads = [threading.Thread(target=worker) for _ in range(n_threads)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert len(build_calls) == 1
        assert len(results) == n_threads
        assert all(r is results[0] for r in results)

    def test_reset_instance(self, clean_instance):
        with mock.patch.object(ContactsDatabase, "build", side_effect=lambda p: memory_db()):
            first = ContactsDatabase.get_instance()
            ContactsDatabase.reset_instance()
            second = ContactsDatabase.get_instance()
        assert first is not second


class TestInMemoryCheckouts:
    """The single in-memory connection is handed to one session at a time."""

    def test_second_session_waits_for_first(self, database):
        events = []
        first_holding = threading.Event()

        def first():
            with database.session_factory() as session:
                session.execute(text("SELECT 1"))
                first_holding.set()
                time.sleep(0.1)
                events.append("first-done")

        def second():
            first_holding.wait()
            with database.session_factory() as session:
                session.execute(text("SELECT 1"))
                events.append("second-ran")

        threads = [threading.Thread(target=first), threading.Thread(target=second)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert events == ["first-done", "second-ran"]
