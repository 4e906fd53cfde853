"""
Entity Models
-------------

Tag model for the Somewhere database.

Models:
    - Tag: A lower-case label attached to any number of items
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List

# --- Third party imports ---
from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

# --- Local imports ---
from .associations import file_tags
from .base import Base

if TYPE_CHECKING:
    from .core import Item


class Tag(Base):
    """
    Tag attached to items.

    Names are stored lower-case, so uniqueness of ``Name`` is effectively
    case-insensitive. A tag without any FileTag row is dangling and is
    removed by ``TagManager.clean_dangling``.

    Attributes:
        id: Primary key (``ID``)
        name: Tag text (``Name``, unique)

    Relationships:
        items: Many-to-many with Item (read only)
    """

    __tablename__ = "Tag"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True)
    name: Mapped[str] = mapped_column("Name", Text, unique=True, nullable=False)

    items: Mapped[List["Item"]] = relationship(
        "Item",
        secondary=file_tags,
        viewonly=True,
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"

    def __str__(self) -> str:
        return self.name
