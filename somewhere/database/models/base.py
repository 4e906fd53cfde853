"""
Base Classes
------------------------

Foundational ORM class for the Somewhere database.

Classes:
    - Base: Declarative base for all SQLAlchemy models

Table and column names are fixed by the on-disk format of
``Home.somewhere`` (``File``, ``Tag``, ``FileTag``...), so every model maps
its attributes to explicitly named columns.
"""
# --- Third party ---
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all ORM models.

    Its metadata is used by ``SomewhereDB.initialize_schema`` to create the
    tables of a new home.
    """

    pass
