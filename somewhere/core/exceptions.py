#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the Somewhere project.

Every error raised on purpose by the store, the naming engine or the
command layer derives from SomewhereError, so the CLI can catch one base
class at its single dispatch point and print a plain message instead of a
traceback.

Exception Hierarchy:
    Exception (built-in)
    └── SomewhereError - Base for all intentional Somewhere errors
        ├── DatabaseError - Base for all store-related errors
        │   ├── DuplicateNameError - Item name already used
        │   ├── NotFoundError - Tag or item reference does not exist
        │   └── ConstraintViolationError - Integrity constraint rejected a write
        ├── PathTooLongError - Physical name cannot fit the path budget
        ├── ValidationError - Malformed input data
        │   └── InvalidArgumentError - Command argument arity/shape violations
        └── InvalidOperationError - Caller-level refusal (not managed, no home)

Usage:
    from somewhere.core.exceptions import DatabaseError, NotFoundError

    try:
        db.tags.rename("alpha", "beta")
    except NotFoundError as e:
        click.echo(str(e))
    except DatabaseError as e:
        logger.log_error(e)
"""


class SomewhereError(Exception):
    """
    Base exception for every error Somewhere raises deliberately.

    Anything outside this hierarchy reaching the CLI is a programming
    error and is reported with its traceback.
    """

    pass


class DatabaseError(SomewhereError):
    """
    Base exception for store-related errors.

    Raised when database operations fail due to connection issues,
    query errors, integrity violations, or other SQLite problems.
    SQLAlchemy exceptions are translated into this class (or one of its
    subclasses) by the ``handle_db_errors`` decorator.

    Examples:
        >>> raise DatabaseError("Database operation failed: disk I/O error")
        >>> raise DatabaseError("TagManager requires active session.")

    See Also:
        DuplicateNameError, NotFoundError, ConstraintViolationError
    """

    pass


class DuplicateNameError(DatabaseError):
    """
    Exception for item names that are already in use.

    Files, folders and notes share a single namespace, so creating or
    renaming any item to a name held by another item raises this error.

    Examples:
        >>> raise DuplicateNameError("Item name `report.txt` is already used.")
    """

    pass


class NotFoundError(DatabaseError):
    """
    Exception for references to tags or items that do not exist.

    Store lookups that may legitimately miss return None; this error is
    reserved for operations that require their target, such as renaming a
    tag or removing an item by ID.

    Examples:
        >>> raise NotFoundError("Specified tag `alpha` does not exist in database.")
        >>> raise NotFoundError("No item found with id: 42")
    """

    pass


class ConstraintViolationError(DatabaseError):
    """
    Exception for writes rejected by an integrity constraint.

    Covers duplicate FileTag pairs and other unique or foreign-key
    violations surfaced by SQLite.

    Examples:
        >>> raise ConstraintViolationError("Data integrity violation: UNIQUE constraint failed: FileTag.FileID, FileTag.TagID")
    """

    pass


class PathTooLongError(SomewhereError):
    """
    Exception for physical names that cannot fit the host path budget.

    Raised by the naming engine when the home directory path leaves no room
    for a file name, even after truncation.

    Examples:
        >>> raise PathTooLongError(
        ...     "Not enough available length for file name. "
        ...     "Please move your Home folder to a shorter path."
        ... )
    """

    pass


class ValidationError(SomewhereError):
    """
    Exception for data validation failures.

    Raised when input data fails validation checks:
    - Missing required fields
    - Values that cannot be converted to the expected type
    - Malformed import sources

    Examples:
        >>> raise ValidationError("Required field 'name' missing or empty")
        >>> raise ValidationError("Invalid tiddler created date: 2020")
    """

    pass


class InvalidArgumentError(ValidationError):
    """
    Exception for command arguments with the wrong arity or shape.

    Arity is checked at the dispatch boundary against each command's
    declared argument specs; commands also raise it for arguments whose
    value they cannot use.

    Examples:
        >>> raise InvalidArgumentError("Command `tag` requires 2 arguments, 1 is given. Use `help tag`.")
        >>> raise InvalidArgumentError("Unrecognized search type: `date`")
    """

    pass


class InvalidOperationError(SomewhereError):
    """
    Exception for operations the caller is not allowed to perform.

    Raised by the command layer when the target is not managed, when the
    current directory is not a home, or when a home already exists.

    Examples:
        >>> raise InvalidOperationError("Specified item `a.txt` is not managed in database.")
    """

    pass
