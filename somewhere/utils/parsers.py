#!/usr/bin/env python3
"""
parsers.py
--------------------
Parsing utilities for command lines and imported text.

Functions:
    break_arguments: Split a shell line into arguments (double-quote aware)
    parse_tiddler_tags: Parse a TiddlyWiki tag field into tag names
    parse_tiddler_created: Parse a TiddlyWiki ``created`` timestamp
    join_tags: Format tag names for output

Usage:
    from somewhere.utils.parsers import break_arguments

    break_arguments('tag "my file.txt" "work, urgent"')
    # Returns: ['tag', 'my file.txt', 'work, urgent']
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from datetime import datetime
from typing import Iterable, List

# --- Local imports ---
from somewhere.core.exceptions import ValidationError

_TIDDLER_LINK = re.compile(r"\[\[(.*?)\]\]")

# yyyy MM dd HH mm ss fff
_TIDDLER_FIELDS = ((0, 4), (4, 6), (6, 8), (8, 10), (10, 12), (12, 14), (14, 17))


def break_arguments(line: str) -> List[str]:
    """
    Split a command line into arguments.

    Spaces separate arguments outside double quotes. Inside quotes a
    doubled quote (``""``) is a literal quote. A closing quote always ends
    an argument, so ``""`` yields an empty argument.

    Args:
        line: Raw command line

    Returns:
        List of arguments, command name first

    Examples:
        >>> break_arguments('create "" "some text" "a, b"')
        ['create', '', 'some text', 'a, b']
        >>> break_arguments('mv "say ""hi"".txt" b.txt')
        ['mv', 'say "hi".txt', 'b.txt']
    """
    arguments: List[str] = []
    current = ""
    quoted = False
    i = 0
    while i < len(line):
        c = line[i]
        if c == " ":
            if quoted:
                current += c
            elif current:
                arguments.append(current)
                current = ""
        elif c == '"':
            if not quoted:
                quoted = True
            elif i + 1 < len(line) and line[i + 1] == '"':
                current += c
                i += 1
            else:
                arguments.append(current)
                current = ""
                quoted = False
        else:
            current += c
        i += 1
    if current:
        arguments.append(current)
    return arguments


def parse_tiddler_tags(tags: str | None) -> List[str]:
    """
    Parse a TiddlyWiki tag field.

    Tags are space separated; ``[[two words]]`` keeps spaces together.
    Double quotes inside tag names become underscores.

    Examples:
        >>> parse_tiddler_tags('journal [[to read]] idea')
        ['journal', 'to read', 'idea']
    """
    if not tags:
        return []
    escaped = _TIDDLER_LINK.sub(r'"\1"', tags.replace('"', "_"))
    return break_arguments(escaped)


def parse_tiddler_created(created: str) -> datetime:
    """
    Parse a TiddlyWiki timestamp (``yyyyMMddHHmmssfff``).

    Raises:
        ValidationError: If the value is not a 17 digit timestamp
    """
    if not created or len(created) != 17 or not created.isdigit():
        raise ValidationError(f"Invalid tiddler created date: {created}")
    fields = [int(created[start:end]) for start, end in _TIDDLER_FIELDS]
    try:
        return datetime(*fields[:6], fields[6] * 1000)
    except ValueError as e:
        raise ValidationError(f"Invalid tiddler created date: {created}") from e


def join_tags(tags: Iterable[str]) -> str:
    return ", ".join(tags)
