#!/usr/bin/env python3
"""
item_manager.py
--------------------
Manages Item rows (the ``File`` table): files, folders, notes and knowledge.

The store only records the logical side of an item. Moving, copying and
deleting the backing file is done by the command layer through
HomeFolder, which calls into this manager once the disk step succeeded.

Key Features:
    - Add (single and batch), rename, change content, change entry date
    - Removal with explicit cleanup of tags and revisions
    - Shared classification for filtering and counting (Item.item_type)
    - Name substring and all-tags filters
    - Detail projections with tags and revision summary
    - YAML meta attributes (Size, MD5, Remark, custom keys)
    - Revision snapshots

Usage:
    item_mgr = ItemManager(session, logger)

    item = item_mgr.add("report.txt")
    note = item_mgr.add("ideas", content="- buy milk")
    item_mgr.rename(item.id, "report-2024.txt")
    details = item_mgr.filter_by_tags_detailed(["work", "urgent"])
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml
from sqlalchemy import delete, distinct, func, select
from sqlalchemy.exc import IntegrityError

from somewhere.core.exceptions import DuplicateNameError, ValidationError
from somewhere.core.logging_manager import safe_logger
from somewhere.core.paths import format_entry_date
from somewhere.core.validators import DataValidator
from somewhere.dataclasses import ItemDetail, RemarkMeta
from somewhere.database.decorators import handle_db_errors, log_database_operation
from somewhere.database.models import Item, ItemType, Revision, Tag, file_tags
from .base_manager import BaseManager


class ItemManager(BaseManager):
    """
    Manages File table operations.

    Item names share one namespace across files, folders and notes; the
    unique constraint on ``Name`` is the final guard behind the explicit
    duplicate checks here.
    """

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("item_exists")
    def exists(self, name: Optional[str]) -> bool:
        return self._exists(Item, "name", name)

    @handle_db_errors
    @log_database_operation("get_item")
    def get(self, name: Optional[str]) -> Optional[Item]:
        """
        Retrieve an item by exact name.

        Returns:
            Item if found, None otherwise (knowledge has no name and is
            only reachable by ID)
        """
        return self._get_by_field(Item, "name", name)

    @handle_db_errors
    @log_database_operation("get_item_by_id")
    def get_by_id(self, item_id: int) -> Optional[Item]:
        return self._get_by_id(Item, item_id)

    @handle_db_errors
    @log_database_operation("get_item_id")
    def get_id(self, name: Optional[str]) -> Optional[int]:
        if name is None:
            return None
        return self.session.scalar(select(Item.id).where(Item.name == name))

    @handle_db_errors
    @log_database_operation("get_all_items")
    def get_all(self, item_type: Optional[Union[ItemType, str]] = None) -> List[Item]:
        """
        Retrieve all items, optionally of one type, in ID order.

        Args:
            item_type: ItemType or its value ("file", "folder", "note", "knowledge")
        """
        query = self.session.query(Item)
        if item_type is not None:
            query = query.filter(Item.item_type == self._item_type(item_type).value)
        return query.order_by(Item.id).all()

    @handle_db_errors
    @log_database_operation("get_item_names")
    def all_names(self) -> List[str]:
        """Names of every named item, sorted."""
        return list(
            self.session.scalars(
                select(Item.name).where(Item.name.is_not(None)).order_by(Item.name)
            )
        )

    # -------------------------------------------------------------------------
    # Creation and updates
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("add_item")
    def add(
        self,
        name: Optional[str],
        content: Optional[str] = None,
        entry_date: Optional[datetime] = None,
    ) -> Item:
        """
        Add an item stamped with the current time.

        Args:
            name: Item name; None creates a knowledge item
            content: Note text; None for files and folders
            entry_date: Override for the entry timestamp

        Returns:
            The new Item, flushed (ID assigned)

        Raises:
            DuplicateNameError: If the name is already used
        """
        if name is not None and self._exists(Item, "name", name):
            raise DuplicateNameError(f"Item name `{name}` is already used.")

        item = Item(name=name, content=content, entry_date=format_entry_date(entry_date))
        self.session.add(item)
        try:
            self._execute_with_retry(self.session.flush)
        except IntegrityError as e:
            raise DuplicateNameError(f"Item name `{name}` is already used.") from e

        safe_logger(self.logger).log_operation(
            "item_added", {"id": item.id, "name": name, "type": item.item_type.value}
        )
        return item

    @handle_db_errors
    @log_database_operation("add_items")
    def add_many(self, names: Iterable[str]) -> List[Item]:
        """
        Add several file or folder items in one flush.

        Raises:
            DuplicateNameError: If any name is already used or repeated
        """
        names = list(names)
        if len(set(names)) != len(names):
            raise DuplicateNameError("Item names in one batch must be distinct.")
        if names:
            used = list(
                self.session.scalars(select(Item.name).where(Item.name.in_(names)))
            )
            if used:
                raise DuplicateNameError(f"Item name `{used[0]}` is already used.")

        stamp = format_entry_date()
        items = [Item(name=name, entry_date=stamp) for name in names]
        self.session.add_all(items)
        self._execute_with_retry(self.session.flush)
        return items

    @handle_db_errors
    @log_database_operation("rename_item")
    def rename(self, item_id: int, new_name: str) -> Item:
        """
        Change an item's name.

        Only the database is updated; for files and folders the caller
        moves the physical file first.

        Raises:
            NotFoundError: If the item does not exist
            DuplicateNameError: If another item already uses the name
        """
        item = self._resolve_object(item_id, Item)
        if item.name == new_name:
            return item
        self._check_name_free(new_name)
        old_name = item.name
        item.name = new_name
        self.session.flush()
        safe_logger(self.logger).log_operation(
            "item_renamed", {"id": item.id, "from": old_name, "to": new_name}
        )
        return item

    @handle_db_errors
    @log_database_operation("change_item_content")
    def change_content(
        self, item_id: int, content: Optional[str], record_revision: bool = False
    ) -> Item:
        """
        Replace a note's text.

        Args:
            item_id: Item ID
            content: New text
            record_revision: Snapshot the previous text as a revision first
        """
        item = self._resolve_object(item_id, Item)
        if record_revision and item.content is not None:
            self._append_revision(item.id, item.content.encode("utf-8"))
        item.content = content
        self.session.flush()
        return item

    @handle_db_errors
    @log_database_operation("change_item")
    def change_item(self, item_id: int, name: Optional[str], content: Optional[str]) -> Item:
        """Replace both name and content of an item."""
        item = self._resolve_object(item_id, Item)
        if name != item.name:
            self._check_name_free(name)
        item.name = name
        item.content = content
        self.session.flush()
        return item

    @handle_db_errors
    @log_database_operation("change_entry_date")
    def change_entry_date(self, item_id: int, when: Union[datetime, str]) -> Item:
        item = self._resolve_object(item_id, Item)
        item.entry_date = format_entry_date(when) if isinstance(when, datetime) else when
        self.session.flush()
        return item

    @handle_db_errors
    @log_database_operation("remove_item")
    def remove(self, item_id: int) -> Optional[str]:
        """
        Delete an item row with its FileTag and Revision rows.

        Dangling tags are left for ``TagManager.clean_dangling``.

        Returns:
            Name of the removed item

        Raises:
            NotFoundError: If the item does not exist
        """
        item = self._resolve_object(item_id, Item)
        name = item.name
        self._sync()
        self.session.execute(delete(file_tags).where(file_tags.c.FileID == item.id))
        self.session.execute(delete(Revision).where(Revision.item_id == item.id))
        self.session.execute(delete(Item).where(Item.id == item.id))
        self._expire()
        safe_logger(self.logger).log_operation("item_removed", {"id": item_id, "name": name})
        return name

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("filter_items_by_name")
    def filter_by_name(self, substring: str) -> List[Item]:
        """Items whose name contains ``substring`` (LIKE, wildcards escaped)."""
        return (
            self.session.query(Item)
            .filter(Item.name.contains(substring, autoescape=True))
            .order_by(Item.name)
            .all()
        )

    @handle_db_errors
    @log_database_operation("filter_items_by_tags")
    def filter_by_tags(self, tags: Iterable[str]) -> List[Item]:
        """
        Items carrying every one of ``tags``.

        An empty tag list matches nothing.
        """
        item_ids = self._ids_with_all_tags(tags)
        if item_ids is None:
            return []
        return (
            self.session.query(Item)
            .filter(Item.id.in_(item_ids))
            .order_by(Item.name)
            .all()
        )

    # -------------------------------------------------------------------------
    # Detail projections
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_item_detail")
    def get_detail(self, item_id: int) -> Optional[ItemDetail]:
        rows = self.session.execute(self._detail_query().where(Item.id == item_id)).all()
        return self._to_detail(rows[0]) if rows else None

    @handle_db_errors
    @log_database_operation("get_item_details")
    def get_details(
        self, item_type: Optional[Union[ItemType, str]] = None
    ) -> List[ItemDetail]:
        """Details of all items (optionally of one type), ordered by name."""
        query = self._detail_query()
        if item_type is not None:
            query = query.where(Item.item_type == self._item_type(item_type).value)
        return [self._to_detail(row) for row in self.session.execute(query)]

    @handle_db_errors
    @log_database_operation("filter_item_details_by_name")
    def filter_by_name_detailed(self, substring: str) -> List[ItemDetail]:
        query = self._detail_query().where(Item.name.contains(substring, autoescape=True))
        return [self._to_detail(row) for row in self.session.execute(query)]

    @handle_db_errors
    @log_database_operation("filter_item_details_by_tags")
    def filter_by_tags_detailed(self, tags: Iterable[str]) -> List[ItemDetail]:
        """Details of items carrying every one of ``tags``, with all their tags."""
        item_ids = self._ids_with_all_tags(tags)
        if item_ids is None:
            return []
        query = self._detail_query().where(Item.id.in_(item_ids))
        return [self._to_detail(row) for row in self.session.execute(query)]

    # -------------------------------------------------------------------------
    # Counts
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("count_items")
    def count(self, item_type: Optional[Union[ItemType, str]] = None) -> int:
        query = select(func.count(Item.id))
        if item_type is not None:
            query = query.where(Item.item_type == self._item_type(item_type).value)
        return self.session.scalar(query)

    @handle_db_errors
    @log_database_operation("count_items_by_type")
    def type_counts(self) -> Dict[ItemType, int]:
        """Item count per type; every type is present, zero if unused."""
        counts = {item_type: 0 for item_type in ItemType}
        rows = self.session.execute(
            select(Item.item_type, func.count(Item.id)).group_by(Item.item_type)
        )
        for value, count in rows:
            counts[ItemType(value)] = count
        return counts

    # -------------------------------------------------------------------------
    # Meta attributes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_item_metas")
    def get_metas(self, item_id: int) -> Dict[str, Any]:
        """All meta attributes of an item (empty if none)."""
        item = self._resolve_object(item_id, Item)
        return self._load_meta(item.meta)

    @handle_db_errors
    @log_database_operation("get_item_meta")
    def get_meta(self, item_id: int, key: str) -> Optional[Any]:
        return self.get_metas(item_id).get(key)

    @handle_db_errors
    @log_database_operation("set_item_meta")
    def set_meta(self, item_id: int, key: str, value: Any) -> Dict[str, Any]:
        """Replace or add one meta attribute; returns the updated mapping."""
        return self.set_metas(item_id, {key: value})

    @handle_db_errors
    @log_database_operation("set_item_metas")
    def set_metas(self, item_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        for key in values:
            if not DataValidator.normalize_string(str(key)):
                raise ValidationError("Meta attribute name cannot be empty")
        item = self._resolve_object(item_id, Item)
        metas = self._load_meta(item.meta)
        metas.update(values)
        item.meta = yaml.safe_dump(metas, allow_unicode=True, sort_keys=False)
        self.session.flush()
        return metas

    @handle_db_errors
    @log_database_operation("get_remark_meta")
    def get_remark_meta(self, item_id: int) -> RemarkMeta:
        item = self._resolve_object(item_id, Item)
        return RemarkMeta.from_yaml(item.meta)

    # -------------------------------------------------------------------------
    # Revisions
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("record_revision")
    def record_revision(self, item_id: int, binary: Optional[bytes]) -> Revision:
        """Append a snapshot; revision numbers per item start at 1."""
        item = self._resolve_object(item_id, Item)
        return self._append_revision(item.id, binary)

    @handle_db_errors
    @log_database_operation("get_revisions")
    def get_revisions(self, item_id: int) -> List[Revision]:
        return (
            self.session.query(Revision)
            .filter(Revision.item_id == item_id)
            .order_by(Revision.revision_id)
            .all()
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _item_type(item_type: Union[ItemType, str]) -> ItemType:
        try:
            return ItemType(item_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown item type `{item_type}`; use one of {', '.join(ItemType.choices())}"
            ) from e

    @staticmethod
    def _load_meta(meta: Optional[str]) -> Dict[str, Any]:
        if not meta or not meta.strip():
            return {}
        data = yaml.safe_load(meta)
        return dict(data) if isinstance(data, dict) else {}

    def _check_name_free(self, name: Optional[str]) -> None:
        if name is not None and self._exists(Item, "name", name):
            raise DuplicateNameError(f"Item name `{name}` is already used.")

    def _append_revision(self, item_id: int, binary: Optional[bytes]) -> Revision:
        latest = self.session.scalar(
            select(func.max(Revision.revision_id)).where(Revision.item_id == item_id)
        )
        revision = Revision(
            item_id=item_id,
            revision_id=(latest or 0) + 1,
            revision_time=format_entry_date(),
            binary=binary,
        )
        self.session.add(revision)
        self.session.flush()
        return revision

    def _ids_with_all_tags(self, tags: Iterable[str]):
        """
        Subquery of item IDs holding all ``tags``, or None for no tags.

        Counts distinct matching tags per item and keeps items whose count
        equals the number of requested tags.
        """
        names = DataValidator.unique_tags(tags)
        if not names:
            return None
        return (
            select(file_tags.c.FileID)
            .join(Tag, Tag.id == file_tags.c.TagID)
            .where(Tag.name.in_(names))
            .group_by(file_tags.c.FileID)
            .having(func.count(distinct(Tag.id)) == len(names))
        )

    @staticmethod
    def _detail_query():
        tag_names = (
            select(
                file_tags.c.FileID.label("item_id"),
                func.group_concat(Tag.name, ", ").label("tags"),
            )
            .select_from(file_tags)
            .join(Tag, Tag.id == file_tags.c.TagID)
            .group_by(file_tags.c.FileID)
            .subquery()
        )
        revisions = (
            select(
                Revision.item_id.label("item_id"),
                func.max(Revision.revision_time).label("revision_time"),
                func.max(Revision.revision_id).label("revision_count"),
            )
            .group_by(Revision.item_id)
            .subquery()
        )
        return (
            select(
                Item.id,
                Item.entry_date,
                Item.name,
                Item.content,
                tag_names.c.tags,
                Item.meta,
                revisions.c.revision_time,
                revisions.c.revision_count,
            )
            .outerjoin(tag_names, tag_names.c.item_id == Item.id)
            .outerjoin(revisions, revisions.c.item_id == Item.id)
            .order_by(Item.name, Item.id)
        )

    @staticmethod
    def _to_detail(row) -> ItemDetail:
        return ItemDetail(
            id=row.id,
            entry_date=row.entry_date,
            name=row.name,
            content=row.content,
            tags=sorted(row.tags.split(", ")) if row.tags else [],
            meta=row.meta,
            revision_time=row.revision_time,
            revision_count=row.revision_count or 0,
        )
