"""
Somewhere Package
=================

A personal file-tagging and note-management tool.

Somewhere keeps track of the files, folders and virtual text notes that
live inside a "home" directory. Everything is recorded in a single SQLite
database (``Home.somewhere``) at the root of that home, which also marks
the directory as managed.

Main Components:
    - core: Logging, validation, paths and exceptions
    - utils: Naming engine, home filesystem wrapper, argument parsing
    - database: SQLAlchemy ORM models and the tag/item/relation managers
    - commands: Statically declared command registry and the Commands facade
    - cli: The ``somewhere`` click entry point (one-shot and shell modes)

Example Usage:
    >>> from somewhere.database import SomewhereDB
    >>> db = SomewhereDB("~/notes")
    >>> db.initialize_schema()
    >>> with db.session_scope():
    ...     item = db.items.add("report.txt")
    ...     db.relations.attach(item.id, ["work", "urgent"])
"""

__version__ = "0.1.0"

from somewhere.database.manager import SomewhereDB
from somewhere.commands import Commands

__all__ = [
    "SomewhereDB",
    "Commands",
]
