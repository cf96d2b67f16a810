"""Shared pytest fixtures for MyContacts tests.

This module contains common fixtures used across multiple test files,
reducing duplication and improving test maintainability.
"""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mycontacts.data_source import ContactsLocalDataSource
from mycontacts.db import ContactsDatabase, init_db
from mycontacts.models import Contact
from services.contacts_api.main import app, override_data_source


@pytest.fixture
def temp_db():
    """Create a temporary file database for testing.

    Creates an isolated SQLite database in a temporary directory.
    The database is cleaned up after the test completes.

    Yields:
        tuple: (db_path, engine, SessionFactory)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        engine, SessionFactory = init_db(db_path)
        yield db_path, engine, SessionFactory
        engine.dispose()


@pytest.fixture
def database():
    """Create an isolated in-memory ContactsDatabase, closed after the test."""
    database = ContactsDatabase.in_memory()
    yield database
    database.close()


@pytest.fixture
def contacts_dao(database):
    """ContactsDao bound to the in-memory database."""
    return database.contacts_dao()


@pytest.fixture
def data_source(contacts_dao):
    """ContactsLocalDataSource over the in-memory database."""
    return ContactsLocalDataSource(contacts_dao)


@pytest.fixture
def contact1():
    return Contact("contact1", "1234567891")


@pytest.fixture
def contact2():
    return Contact("contact2", "1234567892")


@pytest.fixture
def new_contact():
    return Contact("newContact", "1234567893")


@pytest.fixture
def client(data_source):
    """Create a FastAPI test client backed by the in-memory data source.

    The override is cleared after the test completes.

    Yields:
        tuple: (test_client, data_source)
    """
    override_data_source(data_source)

    with TestClient(app) as client:
        yield client, data_source

    override_data_source(None)
