"""MyContacts - Configuration constants.

Minimal configuration. No external config libraries.
All paths are relative to the repository root by default.
"""

import os
from pathlib import Path

# Repository root (parent of mycontacts/)
REPO_ROOT = Path(__file__).parent.parent.resolve()

# Data directory
DATA_DIR = REPO_ROOT / "data"

# Database file name and static schema version (no migrations)
DATABASE_NAME = "contacts_database.db"
DATABASE_VERSION = 1

# Single table holding all contact records
CONTACTS_TABLE = "contacts"


def _get_db_path() -> Path:
    """Get database path from environment or use default.

    Environment variable MYCONTACTS_DB_PATH allows override for testing
    and for running several stores side by side.

    Returns:
        Path to the SQLite database file.
    """
    env_val = os.environ.get("MYCONTACTS_DB_PATH")
    if env_val and env_val.strip():
        return Path(env_val.strip())
    return DATA_DIR / DATABASE_NAME


def _get_debug() -> bool:
    """Get debug flag from environment.

    MYCONTACTS_DEBUG=1 enables debug logging at application start.

    Returns:
        True if debug mode is enabled.
    """
    return os.environ.get("MYCONTACTS_DEBUG") == "1"


# Database path
# Override with MYCONTACTS_DB_PATH environment variable
DB_PATH = _get_db_path()

# Debug mode (controls logging bootstrap in mycontacts.application)
DEBUG = _get_debug()
