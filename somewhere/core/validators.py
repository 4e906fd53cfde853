#!/usr/bin/env python3
"""
validators.py
--------------------
Input validation and normalization shared by the stores and commands.

Tag names, command arguments and configuration values all enter through
here before touching the database, so normalization rules (lower-cased
tags, trimmed strings, boolean spellings) live in one place.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ValidationError

BOOLEAN_WORDS = {
    "true": True, "1": True, "yes": True, "on": True,
    "false": False, "0": False, "no": False, "off": False,
}


class DataValidator:
    """Static normalizers; every value from the command line passes one."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Check that each of ``required_fields`` has a non-empty value.

        Raises:
            ValidationError: Naming the first missing field
        """
        for field in required_fields:
            if data.get(field) in (None, ""):
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """Stripped text, or None for None and blank input."""
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_tag(value: Any) -> Optional[str]:
        """
        Normalize one tag name.

        Tags are stored lower-case and may not contain double quotes,
        which are replaced by underscores. Commas separate tags, so a
        name containing one is rejected.

        Args:
            value: Raw tag name

        Returns:
            Normalized tag name or None if nothing remains

        Raises:
            ValidationError: If the name contains a comma
        """
        text = DataValidator.normalize_string(value)
        if text is None:
            return None
        if "," in text:
            raise ValidationError(f"Tag `{text}` contains a comma, which is not allowed in tags.")
        return text.lower().replace('"', "_")

    @staticmethod
    def split_tags(value: Optional[str]) -> List[str]:
        """
        Split a comma separated tag string into normalized tag names.

        Empty entries are dropped and duplicates collapsed, keeping the
        order of first appearance.

        Args:
            value: Comma separated tags, e.g. ``"Work, urgent,,work"``

        Returns:
            List of tag names, e.g. ``["work", "urgent"]``
        """
        if not value:
            return []
        return DataValidator.unique_tags(value.split(","))

    @staticmethod
    def unique_tags(values: Iterable[Any]) -> List[str]:
        """Normalize a sequence of tag names, dropping blanks and duplicates."""
        result: List[str] = []
        for raw in values:
            tag = DataValidator.normalize_tag(raw)
            if tag and tag not in result:
                result.append(tag)
        return result

    @staticmethod
    def normalize_bool(value: Any) -> Optional[bool]:
        """
        Read a boolean setting.

        Accepts real booleans, the integers 0 and 1, and the spellings in
        ``BOOLEAN_WORDS`` (any case, surrounding blanks ignored).

        Raises:
            ValidationError: For any other integer or string
        """
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int):
            if value not in (0, 1):
                raise ValidationError(f"Cannot convert numeric '{value}' to boolean")
            return bool(value)
        if isinstance(value, str):
            word = value.strip().lower()
            if word not in BOOLEAN_WORDS:
                raise ValidationError(f"Cannot convert '{value}' to boolean")
            return BOOLEAN_WORDS[word]
        return bool(value)

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer.

        Args:
            value: Value to convert

        Returns:
            Integer value or None

        Raises:
            ValidationError: If the value is not an integer
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Cannot convert '{value}' to integer") from e
