"""MyContacts - Application bootstrap.

Wires logging and the process-wide database together:

    application = ContactsApplication()
    application.on_create()
    data_source = application.data_source
"""

from __future__ import annotations

import logging
from pathlib import Path

from mycontacts import config
from mycontacts.data_source import ContactsLocalDataSource
from mycontacts.db import ContactsDatabase

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def init_logging(debug: bool) -> bool:
    """Install a DEBUG console handler, only in debug mode.

    Outside debug mode logging is left untouched so the host process decides.

    Returns:
        True if a handler was installed.
    """
    if not debug:
        return False
    logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    return True


class ContactsApplication:
    """Process entry point owning the contacts data source."""

    def __init__(self, debug: bool | None = None, db_path: str | Path | None = None):
        self.debug = config.DEBUG if debug is None else debug
        self.db_path = db_path
        self.database: ContactsDatabase | None = None
        self.data_source: ContactsLocalDataSource | None = None

    def on_create(self) -> None:
        init_logging(self.debug)
        self.database = ContactsDatabase.get_instance(self.db_path)
        self.data_source = ContactsLocalDataSource(self.database.contacts_dao())
        logger.info("Contacts application started (debug=%s)", self.debug)
