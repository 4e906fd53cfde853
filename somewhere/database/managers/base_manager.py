#!/usr/bin/env python3
"""
base_manager.py
--------------------
Shared plumbing for the store managers.

Every manager wraps one session of a ``SomewhereDB.session_scope`` and
builds its operations from the helpers below: single-field lookups,
get-or-create, ID resolution, retry on a locked database and the
flush/expire pair around Core statements on ``FileTag``.

Usage:
    class TagManager(BaseManager):
        @handle_db_errors
        @log_database_operation("get_tag")
        def get(self, name: str) -> Optional[Tag]:
            return self._get_by_field(Tag, "name", DataValidator.normalize_tag(name))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from abc import ABC
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

# --- Third party imports ---
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

# --- Local imports ---
from somewhere.core.exceptions import NotFoundError
from somewhere.core.logging_manager import SomewhereLogger, safe_logger

T = TypeVar("T")

LOCK_MARKERS = ("locked", "busy")


def _is_lock_error(error: OperationalError) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in LOCK_MARKERS)


class BaseManager(ABC):
    """
    Base class of the Tag, Item, Relation and Config managers.

    Attributes:
        session: Session of the enclosing scope; managers never commit
        logger: Optional SomewhereLogger
    """

    def __init__(self, session: Session, logger: Optional[SomewhereLogger] = None):
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Session handling
    # -------------------------------------------------------------------------

    def _execute_with_retry(
        self,
        operation: Callable[[], Any],
        max_retries: int = 3,
        retry_delay: float = 0.1,
    ) -> Any:
        """
        Run ``operation``; while SQLite reports a lock, wait and try again.

        The delay doubles after every attempt. Any other OperationalError,
        or a lock on the last attempt, is raised unchanged.
        """
        attempt = 1
        while True:
            try:
                return operation()
            except OperationalError as e:
                if attempt >= max_retries or not _is_lock_error(e):
                    raise
                wait_time = retry_delay * 2 ** (attempt - 1)
                safe_logger(self.logger).log_debug(
                    f"Database locked, retrying in {wait_time}s",
                    {"attempt": attempt, "max_retries": max_retries},
                )
                time.sleep(wait_time)
                attempt += 1

    def _sync(self) -> None:
        """Flush ORM changes so Core statements on FileTag see them."""
        self.session.flush()

    def _expire(self) -> None:
        """Drop loaded state after Core statements bypassed the identity map."""
        self.session.expire_all()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def _resolve_object(self, object_id: int, model_class: Type[T]) -> T:
        """
        Load a row by primary key.

        Raises:
            NotFoundError: If no row has the given ID
        """
        obj = self.session.get(model_class, object_id)
        if obj is None:
            raise NotFoundError(f"No {model_class.__name__} found with id: {object_id}")
        return obj

    def _get_by_id(self, model_class: Type[T], object_id: int) -> Optional[T]:
        return self.session.get(model_class, object_id)

    def _get_by_field(self, model_class: Type[T], field_name: str, value: Any) -> Optional[T]:
        """First row whose ``field_name`` equals ``value``; None matches nothing."""
        if value is None:
            return None
        return self.session.query(model_class).filter_by(**{field_name: value}).first()

    def _exists(self, model_class: Type[T], field_name: str, value: Any) -> bool:
        if value is None:
            return False
        matches = self.session.query(model_class).filter_by(**{field_name: value})
        return self.session.query(matches.exists()).scalar()

    def _get_all(self, model_class: Type[T], order_by: Optional[str] = None) -> List[T]:
        query = self.session.query(model_class)
        if order_by is not None:
            query = query.order_by(getattr(model_class, order_by))
        return query.all()

    def _count(self, model_class: Type[T]) -> int:
        return self.session.query(model_class).count()

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Row matching ``lookup_fields``, created (and flushed) when missing.

        ``extra_fields`` only apply to a new row. Commands run one at a
        time, so an IntegrityError on the flush is a genuine violation and
        propagates.
        """
        existing = self.session.query(model_class).filter_by(**lookup_fields).first()
        if existing is not None:
            return existing

        obj = model_class(**{**lookup_fields, **(extra_fields or {})})
        self.session.add(obj)
        self.session.flush()
        return obj
