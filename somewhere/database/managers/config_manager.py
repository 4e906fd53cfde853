#!/usr/bin/env python3
"""
config_manager.py
--------------------
Manages the Configuration table and the append-only command Log.

Key Features:
    - Typed key/value settings with comments
    - Seeding of a fresh home with its default settings
    - Release version stamping on first use of a home
    - Command log written as YAML events

Usage:
    config_mgr = ConfigManager(session, logger)

    config_mgr.set("ThemeColors", "dark")
    config_mgr.get_bool("RegisterCommits")
    config_mgr.append_log(LogEvent("tag", ["a.txt", "work"], ["..."]))
"""
from typing import List, Optional

from sqlalchemy import func, insert, literal_column, select

from somewhere.core.exceptions import ValidationError
from somewhere.core.paths import RELEASE_VERSION, format_entry_date
from somewhere.core.validators import DataValidator
from somewhere.dataclasses import LogEvent
from somewhere.database.decorators import handle_db_errors, log_database_operation
from somewhere.database.models import Configuration, log_table
from .base_manager import BaseManager


DEFAULT_TYPE = "string"
DEFAULT_COMMENT = "A custom configuration."

# (key, value, type, comment) rows written into every new home
DEFAULT_CONFIGURATIONS = (
    (
        "InitialVersion",
        RELEASE_VERSION,
        "string",
        "String code of software version that created this repository.",
    ),
    ("ThemeColors", "", "string", "Theme colors in YAML format."),
    (
        "RegisterCommits",
        "true",
        "boolean",
        "Indicates whether Somewhere should record successful commands into "
        "the Log table. Possible values are `true` and `false`.",
    ),
)


class ConfigManager(BaseManager):
    """Manages Configuration and Log rows."""

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_configuration")
    def get(self, key: str) -> Optional[str]:
        """Value of a setting, or None if the key is not set."""
        row = self._get_by_field(Configuration, "key", key)
        return row.value if row else None

    @handle_db_errors
    @log_database_operation("get_configuration_bool")
    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None or not value.strip():
            return default
        return DataValidator.normalize_bool(value)

    @handle_db_errors
    @log_database_operation("get_all_configurations")
    def get_all(self) -> List[Configuration]:
        return self._get_all(Configuration, order_by="key")

    @handle_db_errors
    @log_database_operation("set_configuration")
    def set(self, key: str, value: str) -> Configuration:
        """
        Set a setting, creating it if needed.

        Existing rows keep their type and comment; new rows get the
        ``string`` type and a generic comment. A ``boolean`` row only
        accepts a recognised true/false word (or an empty value).

        Raises:
            ValidationError: If the key is empty or a boolean value is invalid
        """
        key = DataValidator.normalize_string(key)
        if key is None:
            raise ValidationError("Configuration key cannot be empty")
        row = self._get_or_create(
            Configuration,
            {"key": key},
            {"type": DEFAULT_TYPE, "comment": DEFAULT_COMMENT},
        )
        if row.type == "boolean" and value.strip():
            DataValidator.normalize_bool(value)
        row.value = value
        self.session.flush()
        return row

    @handle_db_errors
    @log_database_operation("seed_configurations")
    def seed_defaults(self) -> None:
        """Insert the default settings of a new home (existing keys are kept)."""
        for key, value, type_, comment in DEFAULT_CONFIGURATIONS:
            self._get_or_create(
                Configuration,
                {"key": key},
                {"value": value, "type": type_, "comment": comment},
            )

    @handle_db_errors
    @log_database_operation("ensure_release_version")
    def ensure_release_version(self) -> None:
        """Record the running release in ``ReleaseVersion``."""
        row = self._get_or_create(
            Configuration,
            {"key": "ReleaseVersion"},
            {"type": "string", "comment": "Somewhere executable release version."},
        )
        if row.value != RELEASE_VERSION:
            row.value = RELEASE_VERSION
            self.session.flush()

    # -------------------------------------------------------------------------
    # Log
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("append_log")
    def append_log(self, event: LogEvent) -> None:
        self.session.execute(
            insert(log_table).values(DateTime=format_entry_date(), Event=event.to_yaml())
        )

    @handle_db_errors
    @log_database_operation("get_logs")
    def get_logs(self) -> List[LogEvent]:
        """Logged events in insertion order."""
        rows = self.session.execute(
            select(log_table.c.Event).order_by(literal_column("rowid"))
        )
        return [LogEvent.from_yaml(event) for (event,) in rows]

    @handle_db_errors
    @log_database_operation("count_logs")
    def log_count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(log_table))
