#!/usr/bin/env python3
"""
Somewhere Database Package
--------------------------
SQLite storage for one home directory.

- manager: SomewhereDB engine, session scope and per-session managers
- managers: Tag, Item, Relation and Config stores
- models: SQLAlchemy ORM models
- decorators: Error translation and operation logging
"""

from .manager import SomewhereDB
from somewhere.core.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    DuplicateNameError,
    NotFoundError,
)
from .decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)

__all__ = [
    # Main manager
    "SomewhereDB",
    # Exceptions
    "DatabaseError",
    "DuplicateNameError",
    "NotFoundError",
    "ConstraintViolationError",
    # Decorators
    "log_database_operation",
    "handle_db_errors",
    "DatabaseOperation",
]
