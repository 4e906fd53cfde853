"""
Metadata Models
---------------

Per-home settings, the command log and item revisions.

Models:
    - Configuration: Key/value settings with type and comment
    - Revision: Append-only content snapshots of an item
    - log_table: Append-only audit trail of executed commands
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import Optional

# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, LargeBinary, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base


class Configuration(Base):
    """
    One setting of the home.

    Attributes:
        key: Setting name (``Key``, primary key)
        value: Value as text (``Value``)
        type: Declared type, e.g. ``string`` or ``boolean`` (``Type``)
        comment: Human readable description (``Comment``)
    """

    __tablename__ = "Configuration"

    key: Mapped[str] = mapped_column("Key", Text, primary_key=True)
    value: Mapped[Optional[str]] = mapped_column("Value", Text)
    type: Mapped[Optional[str]] = mapped_column("Type", Text)
    comment: Mapped[Optional[str]] = mapped_column("Comment", Text)

    def __repr__(self) -> str:
        return f"<Configuration(key={self.key!r}, value={self.value!r})>"


class Revision(Base):
    """
    A historical snapshot of an item.

    Revision numbers start at 1 per item and only grow.
    """

    __tablename__ = "Revision"

    item_id: Mapped[int] = mapped_column(
        "FileID", Integer, ForeignKey("File.ID"), primary_key=True
    )
    revision_id: Mapped[int] = mapped_column("RevisionID", Integer, primary_key=True)
    revision_time: Mapped[Optional[str]] = mapped_column("RevisionTime", Text)
    binary: Mapped[Optional[bytes]] = mapped_column("Binary", LargeBinary)

    def __repr__(self) -> str:
        return f"<Revision(item_id={self.item_id}, revision_id={self.revision_id})>"


# No primary key: rows are only appended and read back in insertion order
log_table = Table(
    "Log",
    Base.metadata,
    Column("DateTime", Text),
    Column("Event", Text),
)
