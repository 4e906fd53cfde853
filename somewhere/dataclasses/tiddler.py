#!/usr/bin/env python3
"""
tiddler.py
-----------------
One entry of a TiddlyWiki JSON export.

TiddlyWiki exports an array of objects with ``title``, ``text``, ``tags``
and ``created`` fields; each becomes a note in the home database.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from somewhere.core.exceptions import ValidationError
from somewhere.core.validators import DataValidator
from somewhere.utils.parsers import parse_tiddler_created, parse_tiddler_tags


@dataclass
class Tiddler:
    title: str
    text: Optional[str] = None
    tags: Optional[str] = None
    created: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tiddler":
        DataValidator.validate_required_fields(data, ["title"])
        return cls(
            title=data["title"],
            text=data.get("text"),
            tags=data.get("tags"),
            created=data.get("created"),
        )

    @classmethod
    def load_json(cls, path: Path) -> List["Tiddler"]:
        """
        Read a TiddlyWiki JSON export.

        Raises:
            ValidationError: If the file is not a JSON array of objects
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(f"`{path}` is not a valid JSON file: {e}") from e
        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            raise ValidationError(f"`{path}` is not a JSON array of tiddlers.")
        return [cls.from_dict(item) for item in data]

    @property
    def tag_list(self) -> List[str]:
        """Tag names, normalized and de-duplicated."""
        return DataValidator.unique_tags(parse_tiddler_tags(self.tags))

    @property
    def created_date(self) -> Optional[datetime]:
        return parse_tiddler_created(self.created) if self.created else None
