#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for one Somewhere home.

Provides the SomewhereDB class for interacting with the SQLite database
``Home.somewhere`` at the root of a home directory.
Handles:
    - Initialization of the database engine and sessionmaker
    - Creation of a new home (schema and default settings)
    - Transaction scopes with automatic commit/rollback
    - Per-session access to the Tag, Item, Relation and Config stores

Key Features:
    - The database file is never created implicitly; only
      ``initialize_schema`` makes a directory a home
    - Managers exist only inside ``session_scope`` and share its session
    - The running release is recorded on the first scope of a process

Usage:
    db = SomewhereDB("~/notes", logger=logger)
    db.initialize_schema()

    with db.session_scope():
        item = db.items.add("report.txt")
        db.relations.attach(item.id, ["work"])

Notes
==============
- The schema is created with ``Base.metadata.create_all``; there are no
  migrations
- Entry dates are stored as text (``YYYY-MM-DD HH:MM:SS.fff``)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Union

# --- Third party ---
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from somewhere.core.exceptions import DatabaseError, InvalidOperationError
from somewhere.core.logging_manager import SomewhereLogger, safe_logger
from somewhere.core.paths import DB_NAME
from .models import Base
from .managers import ConfigManager, ItemManager, RelationManager, TagManager


NOT_A_HOME_MESSAGE = (
    "Cannot connect to database, not in a Home directory. "
    "Use `new` command to initialize a Home repository at current folder."
)


class SomewhereDB:
    """
    Main database manager for a Somewhere home.

    Attributes:
        - home_dir (Path): Resolved home directory.
        - db_path (Path): Path of the ``Home.somewhere`` database file.
        - engine (Engine): SQLAlchemy engine instance.
        - SessionLocal (sessionmaker): SQLAlchemy session factory.

    Usage:
        db = SomewhereDB("~/notes")
        with db.session_scope() as session:
            tags = db.tags.get_all()
    """

    # ---- Initialization ----
    def __init__(
        self,
        home_dir: Union[str, Path],
        logger: Optional[SomewhereLogger] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            home_dir (str | Path): Home directory holding the database.
            logger (SomewhereLogger): Logger for operations (optional)
        """
        self.home_dir = Path(home_dir).expanduser().resolve()
        self.db_path = self.home_dir / DB_NAME
        self.logger = logger
        self._release_recorded = False

        # Managers (bound in session_scope)
        self._tag_manager: Optional[TagManager] = None
        self._item_manager: Optional[ItemManager] = None
        self._relation_manager: Optional[RelationManager] = None
        self._config_manager: Optional[ConfigManager] = None

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Create the engine; no connection is opened until a scope starts."""
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
        )
        self.SessionLocal: sessionmaker = sessionmaker(
            bind=self.engine,
            autoflush=True,
            expire_on_commit=False,
            future=True,
        )
        safe_logger(self.logger).log_debug(
            "database_engine_ready", {"db_path": str(self.db_path)}
        )

    @property
    def is_home(self) -> bool:
        """Whether the home directory holds a database file."""
        return self.db_path.is_file()

    def initialize_schema(self) -> Path:
        """
        Make the directory a home: create all tables and seed settings.

        Returns:
            Path of the new database file

        Raises:
            InvalidOperationError: If a database already exists
        """
        if self.is_home:
            raise InvalidOperationError(
                f"A Somewhere database already exist in {self.home_dir} directory"
            )

        try:
            self.home_dir.mkdir(parents=True, exist_ok=True)
            Base.metadata.create_all(bind=self.engine)
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "initialize_schema"})
            raise DatabaseError(f"Could not initialize database: {e}") from e

        with self.session_scope():
            self.config.seed_defaults()

        safe_logger(self.logger).log_operation(
            "home_created",
            {"db_path": str(self.db_path), "tables_created": len(Base.metadata.tables)},
        )
        return self.db_path

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around operations with logging.

        Also binds the store managers to the session; they are available
        via properties (db.tags, db.items, db.relations, db.config).

        Raises:
            InvalidOperationError: If the directory is not a home
        """
        if not self.is_home:
            raise InvalidOperationError(NOT_A_HOME_MESSAGE)

        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        logger = safe_logger(self.logger)

        self._tag_manager = TagManager(session, self.logger)
        self._item_manager = ItemManager(session, self.logger)
        self._relation_manager = RelationManager(
            session, self.logger, tags=self._tag_manager
        )
        self._config_manager = ConfigManager(session, self.logger)

        logger.log_debug("session_start", {"session_id": session_id})

        try:
            if not self._release_recorded:
                self._config_manager.ensure_release_version()
                self._release_recorded = True
            yield session
            session.commit()
            logger.log_debug("session_commit", {"session_id": session_id})

        except Exception as e:
            session.rollback()
            logger.log_error(e, {"operation": "session_rollback", "session_id": session_id})
            raise
        finally:
            # Clean up managers
            self._tag_manager = None
            self._item_manager = None
            self._relation_manager = None
            self._config_manager = None

            session.close()
            logger.log_debug("session_close", {"session_id": session_id})

    # -------------------------------------------------------------------------
    # Store Properties
    # -------------------------------------------------------------------------

    @property
    def tags(self) -> TagManager:
        """
        Access TagManager for tag operations.

        Raises:
            DatabaseError: If accessed outside of session_scope context
        """
        if self._tag_manager is None:
            raise DatabaseError(
                "TagManager requires active session. "
                "Use within session_scope: "
                "with db.session_scope(): db.tags.get_or_create(...)"
            )
        return self._tag_manager

    @property
    def items(self) -> ItemManager:
        if self._item_manager is None:
            raise DatabaseError(
                "ItemManager requires active session. Use within session_scope."
            )
        return self._item_manager

    @property
    def relations(self) -> RelationManager:
        if self._relation_manager is None:
            raise DatabaseError(
                "RelationManager requires active session. Use within session_scope."
            )
        return self._relation_manager

    @property
    def config(self) -> ConfigManager:
        if self._config_manager is None:
            raise DatabaseError(
                "ConfigManager requires active session. Use within session_scope."
            )
        return self._config_manager
