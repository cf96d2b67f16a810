"""MyContacts - Data access object for the contacts table.

Every method is a single statement run in its own session (one session per
unit of work). No validation beyond primary-key matching: an id that matches
nothing, including the empty string, is simply "not found".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import Insert, delete, insert, literal_column, select, update
from sqlalchemy.orm import sessionmaker

from mycontacts.models import Contact

logger = logging.getLogger(__name__)


def _upsert_statement(contact: Contact) -> Insert:
    """Build an INSERT OR REPLACE for one contact.

    A replaced row is deleted and re-inserted by SQLite, so it moves to the
    end of rowid order.
    """
    table = Contact.__table__
    return (
        insert(table)
        .prefix_with("OR REPLACE")
        .values(
            {
                table.c.entryId: contact.id,
                table.c.name: contact.name,
                table.c.mobile: contact.mobile,
            }
        )
    )


class ContactsDao:
    """Data Access Object to work with the Contact entity."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_all_contacts(self) -> list[Contact]:
        """Return all contacts in insertion order; empty list if none."""
        stmt = select(Contact).order_by(literal_column("rowid"))
        with self._session_factory() as session:
            return list(session.execute(stmt).scalars().all())

    def get_contact_by_id(self, contact_id: str) -> Contact | None:
        """Return the contact with the given id, or None."""
        stmt = select(Contact).where(Contact.id == contact_id)
        with self._session_factory() as session:
            return session.execute(stmt).scalar_one_or_none()

    def insert_contact(self, contact: Contact) -> None:
        """Insert a contact, replacing any row with the same id."""
        with self._session_factory.begin() as session:
            session.execute(_upsert_statement(contact))
        logger.debug("Upserted contact id=%s", contact.id)

    def insert_contacts(self, contacts: Iterable[Contact]) -> None:
        """Insert several contacts in one transaction, replacing on conflict."""
        contacts = list(contacts)
        if not contacts:
            return
        with self._session_factory.begin() as session:
            for contact in contacts:
                session.execute(_upsert_statement(contact))
        logger.debug("Upserted %d contacts", len(contacts))

    def update_contact(self, contact: Contact) -> None:
        """Update name and mobile of the row matching contact.id (no-op if none)."""
        stmt = (
            update(Contact)
            .where(Contact.id == contact.id)
            .values(name=contact.name, mobile=contact.mobile)
        )
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
            rows = result.rowcount
        logger.debug("Updated contact id=%s (rows=%d)", contact.id, rows)

    def delete_contact_by_id(self, contact_id: str) -> None:
        """Delete the row matching contact_id (no-op if none)."""
        stmt = delete(Contact).where(Contact.id == contact_id)
        with self._session_factory.begin() as session:
            result = session.execute(stmt)
            rows = result.rowcount
        logger.debug("Deleted contact id=%s (rows=%d)", contact_id, rows)

    def delete_all_contacts(self) -> None:
        """Delete every contact."""
        with self._session_factory.begin() as session:
            result = session.execute(delete(Contact))
            rows = result.rowcount
        logger.debug("Deleted all contacts (rows=%d)", rows)
