#!/usr/bin/env python3
"""
item_detail.py
-----------------
Read projections built by the Item and Tag stores.

These are detached snapshots: they carry no session and are safe to use
after the session scope that produced them has closed.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# --- Third-party imports ---
import yaml


@dataclass(frozen=True)
class TagUsage:
    """A tag and the number of items carrying it."""

    id: int
    name: str
    count: int


@dataclass
class ItemDetail:
    """
    One item with its tags and revision summary.

    Fields:
    - id:             Item ID
    - entry_date:     Text timestamp the item was added
    - name:           Item name (None for knowledge)
    - content:        Note text (None for files and folders)
    - tags:           Tag names, sorted
    - meta:           Raw YAML meta text
    - revision_time:  Time of the latest revision, if any
    - revision_count: Highest revision number (0 without revisions)
    """

    id: int
    entry_date: Optional[str]
    name: Optional[str]
    content: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    meta: Optional[str] = None
    revision_time: Optional[str] = None
    revision_count: int = 0

    @property
    def tags_text(self) -> str:
        return ", ".join(self.tags)

    @property
    def remark(self) -> Optional[str]:
        return RemarkMeta.from_yaml(self.meta).remark


@dataclass(frozen=True)
class RemarkMeta:
    """The well-known meta attributes of an item (other keys are ignored)."""

    size: Optional[int] = None
    md5: Optional[str] = None
    remark: Optional[str] = None

    @classmethod
    def from_yaml(cls, meta: Optional[str]) -> "RemarkMeta":
        """
        Extract Size, MD5 and Remark from an item's meta text.

        Blank meta, or meta that is not a mapping, yields an empty RemarkMeta.
        """
        if not meta or not meta.strip():
            return cls()
        data: Any = yaml.safe_load(meta)
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemarkMeta":
        size = data.get("Size")
        return cls(
            size=int(size) if size not in (None, "") else None,
            md5=data.get("MD5"),
            remark=data.get("Remark"),
        )
