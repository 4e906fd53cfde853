#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag rows: lookup, creation, rename/merge, deletion and cleanup.

Tag names are normalized (trimmed, lower-cased, quotes replaced) on every
entry point, so callers may pass user input directly.

Key Features:
    - Get-or-create semantics for tag lookup
    - Rename that turns into a merge when the target exists
    - Tag "explosion": one source tag copied onto several targets
    - Batch creation and deletion in the caller's transaction
    - Dangling-tag detection and cleanup
    - Usage statistics

Usage:
    tag_mgr = TagManager(session, logger)

    tag = tag_mgr.get_or_create("Work")          # stored as "work"
    tag_mgr.rename("work", "job")                # TagMoveAction.RENAMED
    tag_mgr.move("job", ["office", "career"])    # rename + append
    removed = tag_mgr.clean_dangling()
"""
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from sqlalchemy import delete, func, insert, select

from somewhere.core.exceptions import NotFoundError, ValidationError
from somewhere.core.logging_manager import safe_logger
from somewhere.core.validators import DataValidator
from somewhere.dataclasses import TagUsage
from somewhere.database.decorators import handle_db_errors, log_database_operation
from somewhere.database.models import Tag, TagMoveAction, file_tags
from .base_manager import BaseManager


class TagManager(BaseManager):
    """
    Manages Tag table operations.

    Association rows (FileTag) are only touched here when a tag is
    merged, exploded or deleted; attaching tags to items is the Relation
    Engine's job.
    """

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("tag_exists")
    def exists(self, name: str) -> bool:
        """
        Check if a tag exists.

        Args:
            name: Tag name (normalized before lookup)

        Returns:
            True if tag exists, False otherwise
        """
        return self._exists(Tag, "name", DataValidator.normalize_tag(name))

    @handle_db_errors
    @log_database_operation("get_tag")
    def get(self, name: str) -> Optional[Tag]:
        """
        Retrieve a tag by name.

        Returns:
            Tag object if found, None otherwise
        """
        return self._get_by_field(Tag, "name", DataValidator.normalize_tag(name))

    @handle_db_errors
    @log_database_operation("get_tag_by_id")
    def get_by_id(self, tag_id: int) -> Optional[Tag]:
        return self._get_by_id(Tag, tag_id)

    @handle_db_errors
    @log_database_operation("get_all_tags")
    def get_all(self) -> List[Tag]:
        """Retrieve all tags ordered by name."""
        return self._get_all(Tag, order_by="name")

    @handle_db_errors
    @log_database_operation("get_tags_by_names")
    def get_many(self, names: Iterable[str]) -> List[Tag]:
        """
        Retrieve the existing tags among ``names`` in one query.

        Unknown names are ignored.
        """
        normalized = DataValidator.unique_tags(names)
        if not normalized:
            return []
        return (
            self.session.query(Tag)
            .filter(Tag.name.in_(normalized))
            .order_by(Tag.name)
            .all()
        )

    @handle_db_errors
    @log_database_operation("count_tags")
    def count(self) -> int:
        return self._count(Tag)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_or_create_tag")
    def get_or_create(self, name: str) -> Tag:
        """
        Get an existing tag or create it.

        Idempotent: calling it twice with the same name (in any case)
        returns the same row.

        Raises:
            ValidationError: If the name is empty after normalization
        """
        normalized = DataValidator.normalize_tag(name)
        if not normalized:
            raise ValidationError("Tag name cannot be empty")
        return self._get_or_create(Tag, {"name": normalized})

    @handle_db_errors
    @log_database_operation("create_tags")
    def create_many(self, names: Iterable[str]) -> List[Tag]:
        """
        Make sure every name exists as a tag, inserting missing ones in one batch.

        Returns:
            All requested tags, ordered by name
        """
        normalized = DataValidator.unique_tags(names)
        if not normalized:
            return []
        self._sync()
        existing = set(
            self.session.scalars(select(Tag.name).where(Tag.name.in_(normalized)))
        )
        missing = [name for name in normalized if name not in existing]
        if missing:
            self.session.execute(insert(Tag), [{"name": name} for name in missing])
            safe_logger(self.logger).log_debug(
                "Tags created", {"count": len(missing), "tags": missing}
            )
        return (
            self.session.query(Tag)
            .filter(Tag.name.in_(normalized))
            .order_by(Tag.name)
            .all()
        )

    # -------------------------------------------------------------------------
    # Rename / merge
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("rename_tag")
    def rename(self, old_name: str, new_name: str) -> TagMoveAction:
        """
        Rename a tag, merging into ``new_name`` if that tag already exists.

        A pure rename keeps the tag ID and leaves associations untouched.
        A merge re-associates every item of the old tag with the existing
        tag (pairs already present are skipped) and deletes the old tag.

        Args:
            old_name: Current tag name
            new_name: New tag name

        Returns:
            TagMoveAction.RENAMED, MERGED, or SKIPPED when both names match

        Raises:
            NotFoundError: If old_name does not exist
            ValidationError: If new_name is empty
        """
        source = self._require(old_name)
        target_name = DataValidator.normalize_tag(new_name)
        if not target_name:
            raise ValidationError("Tag name cannot be empty")
        if target_name == source.name:
            return TagMoveAction.SKIPPED

        target = self._get_by_field(Tag, "name", target_name)
        if target is None:
            source.name = target_name
            self.session.flush()
            safe_logger(self.logger).log_operation(
                "tag_renamed", {"tag_id": source.id, "from": old_name, "to": target_name}
            )
            return TagMoveAction.RENAMED

        self._copy_associations(source.id, target.id)
        self._delete_ids([source.id])
        safe_logger(self.logger).log_operation(
            "tag_merged", {"from": old_name, "into": target_name, "tag_id": target.id}
        )
        return TagMoveAction.MERGED

    @handle_db_errors
    @log_database_operation("move_tag")
    def move(
        self, source_name: str, target_names: Sequence[str]
    ) -> List[Tuple[str, TagMoveAction]]:
        """
        Rename a tag onto one or more targets ("explosion").

        The first target renames or merges the source. Every further
        target is created if needed and receives all items that carried
        the source tag before the move. Targets equal to the source are
        skipped.

        Args:
            source_name: Tag to move
            target_names: Target tag names, in order

        Returns:
            List of (target name, action) pairs in target order

        Raises:
            NotFoundError: If the source tag does not exist
        """
        source = self._require(source_name)
        source_label = source.name
        item_ids = self._item_ids(source.id)
        results: List[Tuple[str, TagMoveAction]] = []

        for index, target_name in enumerate(DataValidator.unique_tags(target_names)):
            if target_name == source_label:
                results.append((target_name, TagMoveAction.SKIPPED))
                continue
            if index == 0:
                results.append((target_name, self.rename(source_label, target_name)))
                continue
            target = self._get_by_field(Tag, "name", target_name)
            action = TagMoveAction.APPENDED
            if target is None:
                target = self._get_or_create(Tag, {"name": target_name})
                action = TagMoveAction.CREATED
            self._add_items_to_tag(item_ids, target.id)
            results.append((target_name, action))

        return results

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("delete_tag")
    def delete(self, tag: Union[str, int]) -> str:
        """
        Delete a tag and all its associations. There is no undo.

        Args:
            tag: Tag name or ID

        Returns:
            Name of the deleted tag

        Raises:
            NotFoundError: If the tag does not exist
        """
        target = self._require(tag)
        name = target.name
        self._delete_ids([target.id])
        safe_logger(self.logger).log_operation("tag_deleted", {"tag": name})
        return name

    @handle_db_errors
    @log_database_operation("delete_tags")
    def delete_many(self, tags: Iterable[Union[str, int]]) -> List[str]:
        """
        Delete several tags and their associations together.

        Names or IDs that do not exist are ignored.

        Returns:
            Names of the tags actually deleted
        """
        names: List[str] = []
        ids: List[int] = []
        for tag in tags:
            if isinstance(tag, int):
                ids.append(tag)
            else:
                normalized = DataValidator.normalize_tag(tag)
                if normalized:
                    names.append(normalized)
        if not names and not ids:
            return []

        found = (
            self.session.query(Tag)
            .filter(Tag.name.in_(names) | Tag.id.in_(ids))
            .order_by(Tag.name)
            .all()
        )
        deleted = [t.name for t in found]
        self._delete_ids([t.id for t in found])
        safe_logger(self.logger).log_operation("tags_deleted", {"tags": deleted})
        return deleted

    @handle_db_errors
    @log_database_operation("get_dangling_tags")
    def get_dangling(self) -> List[Tag]:
        """Tags without any item, found with a left join on FileTag."""
        return (
            self.session.query(Tag)
            .outerjoin(file_tags, Tag.id == file_tags.c.TagID)
            .filter(file_tags.c.FileID.is_(None))
            .order_by(Tag.name)
            .all()
        )

    @handle_db_errors
    @log_database_operation("clean_dangling_tags")
    def clean_dangling(self) -> int:
        """
        Delete every dangling tag.

        Returns:
            Number of tags removed
        """
        self._sync()
        dangling = [tag.id for tag in self.get_dangling()]
        if dangling:
            self.session.execute(delete(Tag).where(Tag.id.in_(dangling)))
            self._expire()
        return len(dangling)

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("tag_usage_counts")
    def usage_counts(self) -> List[TagUsage]:
        """
        Number of items per tag, for tags in use, ordered by name.

        Dangling tags are not listed.
        """
        rows = (
            self.session.query(Tag.id, Tag.name, func.count(file_tags.c.FileID))
            .join(file_tags, Tag.id == file_tags.c.TagID)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name)
            .all()
        )
        return [TagUsage(id=tag_id, name=name, count=count) for tag_id, name, count in rows]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, tag: Union[str, int]) -> Tag:
        if isinstance(tag, int):
            found = self._get_by_id(Tag, tag)
        else:
            found = self._get_by_field(Tag, "name", DataValidator.normalize_tag(tag))
        if found is None:
            raise NotFoundError(f"Specified tag `{tag}` does not exist in database.")
        return found

    def _item_ids(self, tag_id: int) -> List[int]:
        self._sync()
        return list(
            self.session.scalars(
                select(file_tags.c.FileID)
                .where(file_tags.c.TagID == tag_id)
                .order_by(file_tags.c.FileID)
            )
        )

    def _add_items_to_tag(self, item_ids: List[int], tag_id: int) -> None:
        """Attach ``tag_id`` to the items that do not carry it yet."""
        if not item_ids:
            return
        self._sync()
        tagged = set(
            self.session.scalars(
                select(file_tags.c.FileID).where(
                    file_tags.c.TagID == tag_id, file_tags.c.FileID.in_(item_ids)
                )
            )
        )
        rows = [{"FileID": i, "TagID": tag_id} for i in item_ids if i not in tagged]
        if rows:
            self.session.execute(insert(file_tags), rows)
        self._expire()

    def _copy_associations(self, source_id: int, target_id: int) -> None:
        self._add_items_to_tag(self._item_ids(source_id), target_id)

    def _delete_ids(self, tag_ids: List[int]) -> None:
        """Delete FileTag rows first, then the tags."""
        if not tag_ids:
            return
        self._sync()
        self.session.execute(delete(file_tags).where(file_tags.c.TagID.in_(tag_ids)))
        self.session.execute(delete(Tag).where(Tag.id.in_(tag_ids)))
        self._expire()
