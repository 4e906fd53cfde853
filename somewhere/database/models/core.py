"""
Core Models
-----------

The Item model: every managed file, folder, note and knowledge entry.

Models:
    - Item: One row of the ``File`` table

Item kind is derived from ``Name``/``Content`` nullability and the
trailing separator of folder names; see ``ItemType.classify``. The
``item_type`` hybrid attribute gives the same answer in SQL so that
queries never re-implement the rule.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from typing import TYPE_CHECKING, List, Optional

# --- Third party imports ---
from sqlalchemy import Integer, Text, case, or_
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql.elements import ColumnElement

# --- Local imports ---
from .associations import file_tags
from .base import Base
from .enums import ItemType

if TYPE_CHECKING:
    from .entities import Tag
    from .metadata import Revision


class Item(Base):
    """
    A managed item.

    Attributes:
        id: Primary key (``ID``), never reused
        name: Item name (``Name``), unique when not null; a relative path,
            with a trailing separator for folders; null for knowledge
        content: Note text (``Content``); null for files and folders
        meta: YAML mapping of meta attributes (``Meta``)
        entry_date: Text timestamp when the item was added (``EntryDate``)

    Relationships:
        tags: Many-to-many with Tag through FileTag (read only)
        revisions: One-to-many with Revision (read only)
    """

    __tablename__ = "File"
    __table_args__ = {"sqlite_autoincrement": True}

    # ---- Primary fields ----
    id: Mapped[int] = mapped_column("ID", Integer, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column("Name", Text, unique=True, nullable=True)
    content: Mapped[Optional[str]] = mapped_column("Content", Text, nullable=True)
    meta: Mapped[Optional[str]] = mapped_column("Meta", Text, nullable=True)
    entry_date: Mapped[Optional[str]] = mapped_column("EntryDate", Text, nullable=True)

    # ---- Relationships ----
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=file_tags,
        viewonly=True,
        order_by="Tag.name",
    )
    revisions: Mapped[List["Revision"]] = relationship(
        "Revision",
        viewonly=True,
        order_by="Revision.revision_id",
    )

    # ---- Classification ----
    @hybrid_property
    def item_type(self) -> ItemType:
        return ItemType.classify(self.name, self.content)

    @item_type.inplace.expression
    @classmethod
    def _item_type_expression(cls) -> ColumnElement[str]:
        return case(
            (cls.name.is_(None), ItemType.KNOWLEDGE.value),
            (cls.content.is_not(None), ItemType.NOTE.value),
            (
                or_(cls.name.like("%/"), cls.name.like("%\\")),
                ItemType.FOLDER.value,
            ),
            else_=ItemType.FILE.value,
        )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, name={self.name!r}, type={self.item_type.value})>"

    def __str__(self) -> str:
        return self.name if self.name is not None else f"Knowledge #{self.id}"
