"""
Database Models Package
------------------------

SQLAlchemy ORM models for the Somewhere home database.

- base: Declarative base
- associations: FileTag join table
- enums: ItemType, TagMoveAction
- core: Item (``File`` table)
- entities: Tag
- metadata: Configuration, Revision, Log table

Usage:
    from somewhere.database.models import Item, Tag, ItemType
"""
# Base classes
from .base import Base

# Enumerations
from .enums import ItemType, TagMoveAction

# Association tables
from .associations import file_tags

# Core models
from .core import Item

# Entity models
from .entities import Tag

# Settings, log and history
from .metadata import Configuration, Revision, log_table

__all__ = [
    "Base",
    "ItemType",
    "TagMoveAction",
    "file_tags",
    "Item",
    "Tag",
    "Configuration",
    "Revision",
    "log_table",
]
