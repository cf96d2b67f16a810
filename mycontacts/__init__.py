"""MyContacts - Core application modules.

Provides:
- Contact record model and SQLite schema
- Data access layer (ContactsDao) and database container
- Asynchronous, Result-wrapped local data source
"""

__version__ = "0.1.0"
