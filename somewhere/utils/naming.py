#!/usr/bin/env python3
"""
naming.py
-------------------
Logical item names to physical file names.

Item names are arbitrary text; the files backing them must be valid on
both Windows and POSIX, fit the host path limit once joined to the home
directory, keep their extension, and not overwrite an unrelated file.

Functions:
    escape_name: Replace characters no filesystem accepts
    limit: Truncate a string keeping a required ending
    compute_physical_name: Escaped and length-bounded name for an item
    compute_new_physical_name: Same, disambiguated with ``#<id>`` on collision
    with_item_id: The ``#<id>`` form of a physical name

Usage:
    from somewhere.utils.naming import compute_physical_name

    physical = compute_physical_name("Q3: plan?.md", home_dir_length=12)
    physical.name  # 'Q3_ plan_.md'

Everything here is pure; existence checks are passed in as a callable so
HomeFolder can bind them to a directory.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import string
from typing import Callable, NamedTuple, Optional

# --- Local imports ---
from somewhere.core.exceptions import PathTooLongError
from somewhere.core.paths import MAX_PATH_LENGTH

INVALID_CHARACTERS = '/<>:"\\|?*\r\n'
RESERVED_NAMES = frozenset(
    ["CON", "PRN", "AUX", "NUL"]
    + [f"COM{i}" for i in range(1, 10)]
    + [f"LPT{i}" for i in range(1, 10)]
)

_ESCAPE_TABLE = str.maketrans({c: "_" for c in INVALID_CHARACTERS})
_TRAILING_CHARACTERS = string.whitespace + "."

SHORTENED_FILLER = ".."


class PhysicalName(NamedTuple):
    """Result of mapping an item name onto disk."""

    name: str
    stem: str
    extension: str
    available_length: int


def split_extension(name: str) -> tuple[str, str]:
    """Split ``name`` into stem and extension (the extension keeps its dot)."""
    return os.path.splitext(name)


def escape_name(logical_name: str) -> str:
    """
    Make a name safe as a single path component on any filesystem.

    Invalid characters become underscores; trailing whitespace and dots
    are removed. A stem equal to a Windows device name (any case) gets an
    underscore before the extension, e.g. ``con.txt`` -> ``con_.txt``.
    """
    escaped = logical_name.translate(_ESCAPE_TABLE).rstrip(_TRAILING_CHARACTERS)
    stem, extension = split_extension(escaped)
    if stem.upper() in RESERVED_NAMES:
        return f"{stem}_{extension}"
    return escaped


def limit(
    value: str,
    target_length: int,
    end_filler: str = "...",
    required_ending: str = "",
) -> str:
    """
    Limit ``value`` to ``target_length`` characters including any ending.

    When the value is too long it is cut and ``end_filler`` marks the cut;
    ``required_ending`` is always appended.

    Args:
        value: Text to shorten
        target_length: Maximum total length, filler and ending included
        end_filler: Marker appended after a cut
        required_ending: Suffix that must survive (e.g. an extension)

    Returns:
        The possibly shortened string

    Raises:
        PathTooLongError: If filler and ending alone exceed the target length
    """
    actual_length = target_length - len(end_filler) - len(required_ending)
    if len(value) <= actual_length:
        return value + required_ending
    if actual_length < 0:
        raise PathTooLongError(
            f"Not enough available length to shorten `{value}` "
            f"to {target_length} characters with ending `{required_ending}`."
        )
    return value[:actual_length] + end_filler + required_ending


def compute_physical_name(
    logical_name: str,
    home_dir_length: int,
    max_path_length: int = MAX_PATH_LENGTH,
) -> PhysicalName:
    """
    Escape and shorten an item name for storage in the home directory.

    The name budget is the path limit minus the home directory path
    (``home_dir_length`` counts its trailing separator), one character for
    the separator, one reserved for the terminator and the extension
    length. The extension is always kept intact.

    Args:
        logical_name: Item name as stored in the database
        home_dir_length: Length of the home directory path with trailing separator
        max_path_length: Host path length limit

    Returns:
        PhysicalName with the final name and the parts used to build it

    Raises:
        PathTooLongError: If the home directory leaves no room for a name
    """
    escaped = escape_name(logical_name)
    stem, extension = split_extension(escaped)
    available = max_path_length - home_dir_length - 1 - 1 - len(extension)
    if available <= 0:
        raise PathTooLongError(
            "Not enough available length for file name. "
            "Please move your Home folder to a shorter path."
        )
    name = limit(stem, available, SHORTENED_FILLER, extension)
    return PhysicalName(name, stem, extension, available)


def compute_new_physical_name(
    logical_name: str,
    item_id: int,
    home_dir_length: int,
    exists: Callable[[str], bool],
    old_physical_name: Optional[str] = None,
    max_path_length: int = MAX_PATH_LENGTH,
) -> str:
    """
    Physical name for an item about to be written under a new name.

    If the computed name is taken by another file, the item ID is inserted
    before the extension (``long na..#42.txt``). IDs are unique, so no
    retry loop is needed. Keeping the item's own current name
    (``old_physical_name``) is never a collision.

    Args:
        logical_name: New item name
        item_id: Database ID of the item
        home_dir_length: Length of the home directory path with trailing separator
        exists: Callable telling whether a physical name is already on disk
        old_physical_name: The item's current physical name, if any
        max_path_length: Host path length limit

    Returns:
        Physical name to move or write the item to
    """
    physical = compute_physical_name(logical_name, home_dir_length, max_path_length)
    if physical.name != old_physical_name and exists(physical.name):
        return with_item_id(physical, item_id)
    return physical.name


def with_item_id(physical: PhysicalName, item_id: int) -> str:
    """
    The ``#<id>`` form of a physical name, e.g. ``long na..#42.txt``.

    The ID is placed before the extension and counts against the same
    length budget as the name.
    """
    return limit(
        physical.stem,
        physical.available_length,
        SHORTENED_FILLER,
        f"#{item_id}{physical.extension}",
    )
