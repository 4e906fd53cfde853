#!/usr/bin/env python3
"""
managers package
--------------------
Store managers for the Somewhere home database.

Each manager handles the operations of one store, shares the session of
the current scope and inherits from BaseManager.

Available Managers:
    BaseManager: Abstract base class with common utilities
    TagManager: Tag lookup, rename/merge, deletion and cleanup
    ItemManager: Files, folders, notes and knowledge
    RelationManager: Item-tag associations (FileTag)
    ConfigManager: Configuration settings and the command Log

Usage:
    from somewhere.database.managers import ItemManager, TagManager

    item_mgr = ItemManager(session, logger)
    tag_mgr = TagManager(session, logger)
"""
from .base_manager import BaseManager
from .tag_manager import TagManager
from .item_manager import ItemManager
from .relation_manager import RelationManager
from .config_manager import ConfigManager

__all__ = [
    "BaseManager",
    "TagManager",
    "ItemManager",
    "RelationManager",
    "ConfigManager",
]
