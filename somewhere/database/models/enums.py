"""
Enumeration Types
------------------

Enum classes for the Somewhere database models.

Enums:
    - ItemType: Derived kind of an item (file, folder, note, knowledge)
    - TagMoveAction: What happened to each target of a tag move

The item type is never stored. ``ItemType.classify`` is the Python side
of the classification; ``Item.item_type`` carries the matching SQL
expression used for filtering and counting.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List, Optional


class ItemType(str, Enum):
    """
    Enumeration of item kinds.
    - FILE: Physical file in the home directory
    - FOLDER: Physical folder, named with a trailing separator
    - NOTE: Virtual text note with a name
    - KNOWLEDGE: Virtual text note without a name
    """

    FILE = "file"
    FOLDER = "folder"
    NOTE = "note"
    KNOWLEDGE = "knowledge"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available item type choices."""
        return [item_type.value for item_type in cls]

    @classmethod
    def classify(cls, name: Optional[str], content: Optional[str]) -> "ItemType":
        """
        Classify an item from its name and content.

        Rules are checked in order: no name is knowledge, any content is a
        note, a trailing ``/`` or ``\\`` is a folder, anything else a file.
        """
        if name is None:
            return cls.KNOWLEDGE
        if content is not None:
            return cls.NOTE
        if name.endswith(("/", "\\")):
            return cls.FOLDER
        return cls.FILE

    @property
    def is_physical(self) -> bool:
        """Files and folders exist on disk; notes only in the database."""
        return self in (ItemType.FILE, ItemType.FOLDER)


class TagMoveAction(str, Enum):
    """
    Outcome for one target of a tag rename, merge or explosion.
    - RENAMED: Source tag renamed in place (ID kept)
    - MERGED: Source merged into an existing tag and deleted
    - CREATED: New tag created and given the source's items
    - APPENDED: Existing tag given the source's items
    - SKIPPED: Target equal to the source
    """

    RENAMED = "renamed"
    MERGED = "merged"
    CREATED = "created"
    APPENDED = "appended"
    SKIPPED = "skipped"

    @classmethod
    def choices(cls) -> List[str]:
        return [action.value for action in cls]
