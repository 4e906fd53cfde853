#!/usr/bin/env python3
"""
decorators.py
--------------------
Shared decorators and context managers for store operations.

Every public manager method is wrapped in ``handle_db_errors`` (outer) and
``log_database_operation`` (inner), so SQLAlchemy failures surface as
Somewhere's DatabaseError family and each call leaves a timed record in
the operations log.
"""
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from somewhere.core.exceptions import ConstraintViolationError, DatabaseError
from somewhere.core.logging_manager import SomewhereLogger, safe_logger


def _operation_id(operation_name: str, start_time: datetime) -> str:
    return f"{operation_name}_{start_time.strftime('%Y%m%d_%H%M%S_%f')}"


def _translate(error: SQLAlchemyError) -> DatabaseError:
    if isinstance(error, IntegrityError):
        return ConstraintViolationError(f"Data integrity violation: {error}")
    return DatabaseError(f"Database operation failed: {error}")


def log_database_operation(operation_name: str):
    """
    Decorator to log store operations with timing and context.

    Args:
        operation_name: Name of the operation being logged

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        @wraps(function)
        def wrapper(self, *args, **kwargs):
            start_time = datetime.now()
            operation_id = _operation_id(operation_name, start_time)
            logger = safe_logger(getattr(self, "logger", None))

            logger.log_debug(
                f"Starting {operation_name}",
                {
                    "operation_id": operation_id,
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                },
            )

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        "operation_id": operation_id,
                        "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    },
                )
                raise

            logger.log_operation(
                f"{operation_name}_completed",
                {
                    "operation_id": operation_id,
                    "duration_seconds": (datetime.now() - start_time).total_seconds(),
                    "success": True,
                },
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator to translate SQLAlchemy errors.

    IntegrityError becomes ConstraintViolationError, any other
    SQLAlchemyError becomes DatabaseError. Everything else, including
    Somewhere's own errors, propagates unchanged.
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except SQLAlchemyError as e:
            raise _translate(e) from e

    return wrapper


class DatabaseOperation:
    """
    Context manager combining ``log_database_operation`` and
    ``handle_db_errors`` for a block of code.

    Usage:
        with DatabaseOperation(self.logger, "batch_attach_tags"):
            self.session.execute(insert(file_tags), rows)
    """

    def __init__(
        self,
        logger: Optional[SomewhereLogger],
        operation_name: str,
        log_start: bool = False,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.logger = safe_logger(logger)
        self.operation_name = operation_name
        self.log_start = log_start
        self.details = details or {}
        self.start_time: Optional[datetime] = None

    def __enter__(self) -> "DatabaseOperation":
        self.start_time = datetime.now()
        if self.log_start:
            self.logger.log_debug(
                f"Starting {self.operation_name}",
                {"operation_id": _operation_id(self.operation_name, self.start_time)},
            )
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        duration = (datetime.now() - self.start_time).total_seconds()
        if exc_value is None:
            self.logger.log_operation(
                f"{self.operation_name}_completed",
                {**self.details, "duration_seconds": duration, "success": True},
            )
            return False

        self.logger.log_error(
            exc_value,
            {"operation": self.operation_name, "duration_seconds": duration},
        )
        if isinstance(exc_value, SQLAlchemyError):
            raise _translate(exc_value) from exc_value
        return False
