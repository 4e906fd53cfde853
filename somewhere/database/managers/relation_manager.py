#!/usr/bin/env python3
"""
relation_manager.py
--------------------
Manages the many-to-many relation between items and tags (FileTag).

Every write goes through Core ``insert``/``delete`` on the association
table; the ORM ``Item.tags`` collection is read only and gets expired
after each change.

Key Features:
    - Attach tags, creating missing ones
    - Detach tags, ignoring ones the item does not carry
    - Replace an item's whole tag set
    - Batch attach for many items with a bounded number of statements

Usage:
    rel_mgr = RelationManager(session, logger, tags=tag_mgr)

    rel_mgr.attach(item.id, ["work", "urgent"])
    rel_mgr.replace(item.id, ["archive"])
    rel_mgr.batch_attach({"a.txt": ["x"], "b.txt": ["x", "y"]})
"""
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from somewhere.core.exceptions import NotFoundError
from somewhere.core.logging_manager import SomewhereLogger, safe_logger
from somewhere.core.validators import DataValidator
from somewhere.database.decorators import (
    DatabaseOperation,
    handle_db_errors,
    log_database_operation,
)
from somewhere.database.models import Item, Tag, file_tags
from .base_manager import BaseManager
from .tag_manager import TagManager


class RelationManager(BaseManager):
    """
    Manages FileTag rows.

    Attributes:
        tags: TagManager sharing the same session, used to create tags and
            to clean dangling ones after a replace
    """

    def __init__(
        self,
        session: Session,
        logger: Optional[SomewhereLogger] = None,
        tags: Optional[TagManager] = None,
    ):
        super().__init__(session, logger)
        self.tags = tags or TagManager(session, logger)

    @handle_db_errors
    @log_database_operation("get_item_tags")
    def get_tags(self, item_id: int) -> List[str]:
        """Tag names of an item, ordered by name."""
        self._sync()
        return list(
            self.session.scalars(
                select(Tag.name)
                .join(file_tags, Tag.id == file_tags.c.TagID)
                .where(file_tags.c.FileID == item_id)
                .order_by(Tag.name)
            )
        )

    @handle_db_errors
    @log_database_operation("attach_tags")
    def attach(self, item_id: int, tags: Iterable[str]) -> List[str]:
        """
        Attach tags to an item, creating tags that do not exist yet.

        Pairs that already exist are left alone.

        Args:
            item_id: Item ID
            tags: Tag names (normalized here)

        Returns:
            The item's tag names after the change

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self._resolve_object(item_id, Item)
        names = DataValidator.unique_tags(tags)
        if names:
            tag_ids = [self.tags.get_or_create(name).id for name in names]
            self._sync()
            present = set(
                self.session.scalars(
                    select(file_tags.c.TagID).where(file_tags.c.FileID == item.id)
                )
            )
            rows = [
                {"FileID": item.id, "TagID": tag_id}
                for tag_id in tag_ids
                if tag_id not in present
            ]
            if rows:
                self.session.execute(insert(file_tags), rows)
            self._expire()
        return self.get_tags(item.id)

    @handle_db_errors
    @log_database_operation("detach_tags")
    def detach(self, item_id: int, tags: Iterable[str]) -> List[str]:
        """
        Remove tags from an item.

        Tags the item does not carry, or that do not exist, are ignored.
        The tags themselves are kept even if no item uses them anymore.

        Returns:
            The item's tag names after the change
        """
        item = self._resolve_object(item_id, Item)
        names = DataValidator.unique_tags(tags)
        if names:
            self._sync()
            tag_ids = select(Tag.id).where(Tag.name.in_(names)).scalar_subquery()
            self.session.execute(
                delete(file_tags).where(
                    file_tags.c.FileID == item.id, file_tags.c.TagID.in_(tag_ids)
                )
            )
            self._expire()
        return self.get_tags(item.id)

    @handle_db_errors
    @log_database_operation("detach_all_tags")
    def detach_all(self, item_id: int) -> None:
        self._sync()
        self.session.execute(delete(file_tags).where(file_tags.c.FileID == item_id))
        self._expire()

    @handle_db_errors
    @log_database_operation("replace_tags")
    def replace(self, item_id: int, tags: Iterable[str]) -> List[str]:
        """
        Replace an item's tag set.

        The result equals the normalized ``tags`` exactly. Tags left
        without items by the replacement are deleted.

        Returns:
            The item's tag names after the change
        """
        item = self._resolve_object(item_id, Item)
        self.detach_all(item.id)
        result = self.attach(item.id, tags)
        removed = self.tags.clean_dangling()
        if removed:
            safe_logger(self.logger).log_debug(
                "Dangling tags removed", {"item_id": item.id, "count": removed}
            )
        return result

    @handle_db_errors
    def batch_attach(self, assignments: Dict[Union[str, int], Iterable[str]]) -> int:
        """
        Attach tags to many items at once.

        Items are given by name or ID and are all resolved before any
        missing tag is created. Existing pairs are read in one query and
        the new pairs are written with a single executemany insert.

        Args:
            assignments: Mapping of item name or ID to its tag names

        Returns:
            Number of FileTag rows inserted

        Raises:
            NotFoundError: If an item does not exist
        """
        wanted = {key: DataValidator.unique_tags(tags) for key, tags in assignments.items()}
        all_names = DataValidator.unique_tags(
            name for names in wanted.values() for name in names
        )

        with DatabaseOperation(
            self.logger, "batch_attach_tags", details={"items": len(wanted)}
        ):
            item_ids = self._item_ids(list(wanted))
            tag_ids = {tag.name: tag.id for tag in self.tags.create_many(all_names)}

            self._sync()
            existing = set()
            if item_ids:
                existing = set(
                    self.session.execute(
                        select(file_tags.c.FileID, file_tags.c.TagID).where(
                            file_tags.c.FileID.in_(list(item_ids.values()))
                        )
                    ).tuples()
                )

            rows = []
            for key, names in wanted.items():
                for name in names:
                    pair = (item_ids[key], tag_ids[name])
                    if pair not in existing:
                        existing.add(pair)
                        rows.append({"FileID": pair[0], "TagID": pair[1]})
            if rows:
                self._execute_with_retry(
                    lambda: self.session.execute(insert(file_tags), rows)
                )
            self._expire()
        return len(rows)

    def _item_ids(self, keys: List[Union[str, int]]) -> Dict[Union[str, int], int]:
        """Resolve item names and IDs in one query per kind."""
        names = [key for key in keys if isinstance(key, str)]
        ids = [key for key in keys if isinstance(key, int)]
        found: Dict[Union[str, int], int] = {}
        if names:
            for item_id, name in self.session.execute(
                select(Item.id, Item.name).where(Item.name.in_(names))
            ):
                found[name] = item_id
        if ids:
            for item_id in self.session.scalars(select(Item.id).where(Item.id.in_(ids))):
                found[item_id] = item_id
        missing = [key for key in keys if key not in found]
        if missing:
            raise NotFoundError(f"Specified item `{missing[0]}` is not managed in database.")
        return found
