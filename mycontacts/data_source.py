"""MyContacts - Contacts data-source contract and local implementation.

ContactsDataSource is the asynchronous contract consumed by callers.
ContactsLocalDataSource implements it over ContactsDao, running each DAO call
on a background executor so the awaiting event loop is never blocked.

Error policy:
- Reads (get_contacts, get_contact) never raise; failures come back as Error.
- Mutations (save/update/delete) return None and let failures propagate.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from concurrent.futures import Executor
from typing import Protocol, TypeVar

from mycontacts.dao import ContactsDao
from mycontacts.models import Contact
from mycontacts.result import Error, Result, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContactNotFoundError(LookupError):
    """No contact is stored under the requested id.

    Error code: CONTACT_NOT_FOUND
    """

    def __init__(self, contact_id: str):
        self.contact_id = contact_id
        super().__init__(f"CONTACT_NOT_FOUND: no contact with id '{contact_id}'")


class ContactsDataSource(Protocol):
    """Contract shared by contact data sources."""

    async def get_contacts(self) -> Result[list[Contact]]: ...

    async def get_contact(self, contact_id: str) -> Result[Contact]: ...

    async def save_contact(self, contact: Contact) -> None: ...

    async def update_contact(self, contact: Contact) -> None: ...

    async def delete_contact(self, contact_id: str) -> None: ...

    async def delete_all_contacts(self) -> None: ...


class ContactsLocalDataSource:
    """Data source backed by the local SQLite database.

    Args:
        contacts_dao: DAO performing the raw statements.
        executor: Executor that runs DAO calls. None uses the running loop's
            default thread pool.
    """

    def __init__(self, contacts_dao: ContactsDao, executor: Executor | None = None):
        self._dao = contacts_dao
        self._executor = executor

    async def _run(self, func: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, functools.partial(func, *args))

    async def get_contacts(self) -> Result[list[Contact]]:
        """Return all contacts; Success([]) when the table is empty."""
        try:
            return Success(await self._run(self._dao.get_all_contacts))
        except Exception as e:
            logger.warning("Failed to load contacts", exc_info=True)
            return Error(e)

    async def get_contact(self, contact_id: str) -> Result[Contact]:
        """Return the contact with the given id, or Error(ContactNotFoundError)."""
        try:
            contact = await self._run(self._dao.get_contact_by_id, contact_id)
        except Exception as e:
            logger.warning("Failed to load contact id=%s", contact_id, exc_info=True)
            return Error(e)
        if contact is None:
            return Error(ContactNotFoundError(contact_id))
        return Success(contact)

    async def save_contact(self, contact: Contact) -> None:
        """Save a contact, replacing any stored contact with the same id."""
        await self._run(self._dao.insert_contact, contact)

    async def update_contact(self, contact: Contact) -> None:
        """Update the stored contact with the same id (no-op if none)."""
        await self._run(self._dao.update_contact, contact)

    async def delete_contact(self, contact_id: str) -> None:
        """Delete a single contact by id (no-op if none)."""
        await self._run(self._dao.delete_contact_by_id, contact_id)

    async def delete_all_contacts(self) -> None:
        """Delete all contacts."""
        await self._run(self._dao.delete_all_contacts)


__all__ = ["ContactNotFoundError", "ContactsDataSource", "ContactsLocalDataSource"]
