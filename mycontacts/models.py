"""MyContacts - SQLAlchemy ORM models.

Single table:
1. contacts (entryId, name, mobile)
"""

import uuid

from sqlalchemy import Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from mycontacts.config import CONTACTS_TABLE


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_contact_id() -> str:
    """Generate a unique contact ID.

    Uses UUID4 for uniqueness. Format: canonical 36-char string.
    """
    return str(uuid.uuid4())


class Contact(Base):
    """A stored contact record.

    The id is generated when not supplied. Only None counts as "not supplied":
    an empty string is kept as-is and treated like any other id value.
    """

    __tablename__ = CONTACTS_TABLE

    # Primary key, stored in the "entryId" column
    id: Mapped[str] = mapped_column("entryId", Text, primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    mobile: Mapped[str] = mapped_column(Text, nullable=False)

    def __init__(self, name: str, mobile: str, id: str | None = None):
        self.name = name
        self.mobile = mobile
        self.id = id if id is not None else generate_contact_id()

    def __repr__(self) -> str:
        return f"Contact(id={self.id!r}, name={self.name!r}, mobile={self.mobile!r})"
