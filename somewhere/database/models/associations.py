"""
Association Tables
-------------------

The item/tag join table.

``FileTag`` has no columns beyond its composite primary key, so it is a
plain Core table. Rows are written with Core ``insert``/``delete``
statements by the Relation Engine and Tag Store; the ORM relationships
over it are view-only.
"""
# --- Third party imports ---
from sqlalchemy import Column, ForeignKey, Integer, Table

# --- Local imports ---
from .base import Base

file_tags = Table(
    "FileTag",
    Base.metadata,
    Column("FileID", Integer, ForeignKey("File.ID"), primary_key=True),
    Column("TagID", Integer, ForeignKey("Tag.ID"), primary_key=True),
)
