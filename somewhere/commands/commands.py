#!/usr/bin/env python3
"""
commands.py
--------------------
The Commands facade: one method per Somewhere command.

Every method takes the command's positional arguments as strings and
returns the output as a list of lines. Methods that need the database run
inside a single ``session_scope`` so each command is all-or-nothing; when a
command touches the disk, the filesystem step happens first and the store
is updated after it succeeded.

Usage:
    with Commands("~/notes") as commands:
        commands.new()
        commands.add("report.txt", "work, urgent")
        for line in commands.files():
            print(line)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

# --- Local imports ---
from somewhere.core.exceptions import (
    InvalidArgumentError,
    InvalidOperationError,
    SomewhereError,
    ValidationError,
)
from somewhere.core.logging_manager import SomewhereLogger, safe_logger
from somewhere.core.paths import DELETED_SUFFIX
from somewhere.core.validators import DataValidator
from somewhere.dataclasses import ItemDetail, Tiddler
from somewhere.database.manager import SomewhereDB
from somewhere.database.models import ItemType, TagMoveAction
from somewhere.utils.fs import HomeFolder, split_directory_as_tags, walk_files
from somewhere.utils.naming import limit
from somewhere.utils.parsers import join_tags
from .registry import COMMANDS, REGISTRY, CommandSpec, get_spec

DEFAULT_DOCUMENT = "SomewhereDoc.txt"
SEPARATOR = "------------"

# Asked before purging without `-f`; receives the lines to show
ConfirmCallback = Callable[[List[str]], bool]


def _plural(count: int, singular: str, plural: str) -> str:
    return plural if count > 1 else singular


class Commands:
    """
    Command implementations for one home directory.

    The database engine is created on first use and released by
    ``close()`` (or on leaving the ``with`` block).

    Attributes:
        home_dir: Resolved home directory
        home: HomeFolder for the on-disk half of commands
        logger: Optional SomewhereLogger shared with the stores
        confirm: Callback asked before purging without ``-f``; when missing,
            such a purge is cancelled
    """

    def __init__(
        self,
        home_dir: Union[str, Path],
        logger: Optional[SomewhereLogger] = None,
        confirm: Optional[ConfirmCallback] = None,
    ) -> None:
        self.home_dir = Path(home_dir).expanduser().resolve()
        self.home = HomeFolder(self.home_dir)
        self.logger = logger
        self.confirm = confirm
        self._db: Optional[SomewhereDB] = None

    @property
    def db(self) -> SomewhereDB:
        if self._db is None:
            self._db = SomewhereDB(self.home_dir, logger=self.logger)
        return self._db

    def close(self) -> None:
        if self._db is not None:
            self._db.dispose()
            self._db = None

    def __enter__(self) -> "Commands":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # File
    # -------------------------------------------------------------------------

    def add(self, itemname: str, tags: Optional[str] = None) -> List[str]:
        """
        Add an item to home.

        Files outside home are copied in; folders outside home are moved
        in. ``*`` adds every unmanaged file directly under home.
        """
        if itemname == "*":
            return self._add_all(tags)

        db = self.db
        with db.session_scope():
            name = self._bring_into_home(itemname)
            if db.items.exists(name):
                return [f"Item `{name}` already added in database."]

            item = db.items.add(name)
            if item.item_type is ItemType.FILE:
                db.items.set_metas(item.id, self._file_meta(name, item.id))
            if tags is not None:
                db.relations.attach(item.id, DataValidator.split_tags(tags))
            count = db.items.count()

        return [
            f"Item `{name}` added to database with a total of "
            f"{count} {_plural(count, 'item', 'items')}."
        ]

    def create(self, notename: str, content: str, tags: str) -> List[str]:
        """Create a note, or a knowledge item when the name is empty."""
        name = notename or None
        db = self.db
        with db.session_scope():
            if name is not None and self.home.file_exists(name):
                raise InvalidArgumentError(
                    f"Specified notename `{name}` already exist (as a physical file) on disk."
                )
            if name is not None and db.items.exists(name):
                raise InvalidOperationError(
                    f"Specified notename `{name}` is already used by another virtual file in database."
                )
            item = db.items.add(name, content)
            all_tags = db.relations.attach(item.id, DataValidator.split_tags(tags))
            label = f"Knowledge #{item.id}" if name is None else f"Note `{name}`"

        return [
            f"{label} has been created with {len(all_tags)} "
            f"{_plural(len(all_tags), 'tag', 'tags')}: `{join_tags(all_tags)}`."
        ]

    def mv(self, filename: str, newfilename: str) -> List[str]:
        """Rename an item, moving its physical file or folder when it has one."""
        if filename == newfilename:
            return [f"Filename `{filename}` is the same as new filename: `{newfilename}`."]

        db = self.db
        with db.session_scope():
            item = db.items.get(filename)
            if item is None:
                raise InvalidOperationError(
                    f"Specified item `{filename}` is not managed in database."
                )
            old_physical = self.home.physical_path_for(filename, item.id)
            new_physical = self.home.new_physical_path_for(newfilename, item.id, old_physical)
            taken_on_disk = new_physical != old_physical and (
                self.home.file_exists(new_physical) or self.home.dir_exists(new_physical)
            )
            if taken_on_disk or db.items.exists(newfilename):
                raise InvalidArgumentError(f"Itemname `{newfilename}` is already used.")

            if self.home.file_exists(old_physical) or self.home.dir_exists(old_physical):
                self.home.move(old_physical, new_physical)
                result = [f"File (Physical) `{filename}` has been renamed to `{newfilename}`."]
            else:
                result = [f"Virtual file `{filename}` has been renamed to `{newfilename}`."]
            db.items.rename(item.id, newfilename)

        return result

    def rm(self, filename: str, flag: Optional[str] = None) -> List[str]:
        """
        Remove an item.

        Physical items are renamed with a ``_deleted`` suffix, or deleted
        from disk with ``-f``. The database row goes either way.
        """
        db = self.db
        with db.session_scope():
            item = db.items.get(filename)
            if item is None:
                raise InvalidOperationError(
                    f"Specified item `{filename}` is not managed in database."
                )

            if item.item_type.is_physical:
                physical = self.home.physical_path_for(filename, item.id)
                if not (self.home.file_exists(physical) or self.home.dir_exists(physical)):
                    raise InvalidArgumentError(f"Specified item `{filename}` doesn't exist on disk.")
                if flag == "-f":
                    self.home.delete(physical)
                    result = [f"File `{filename}` is forever gone (deleted)."]
                else:
                    marked = self.home.new_physical_path_for(
                        physical + DELETED_SUFFIX, item.id, physical
                    )
                    self.home.move(physical, marked)
                    result = [f"File `{filename}` is marked as \"{DELETED_SUFFIX}\"."]
            else:
                result = [f"Note `{filename}` has been deleted."]

            db.items.remove(item.id)

        return result

    # -------------------------------------------------------------------------
    # Tagging
    # -------------------------------------------------------------------------

    def tag(self, filename: str, tags: str) -> List[str]:
        db = self.db
        with db.session_scope():
            item_id = self._require_managed(filename)
            all_tags = db.relations.attach(item_id, DataValidator.split_tags(tags))
        return [self._tags_updated(filename, all_tags)]

    def untag(self, filename: str, tags: str) -> List[str]:
        db = self.db
        with db.session_scope():
            item_id = self._require_managed(filename)
            all_tags = db.relations.detach(item_id, DataValidator.split_tags(tags))
        return [self._tags_updated(filename, all_tags)]

    def update(self, filename: str, tags: str) -> List[str]:
        """Replace the item's tags; tags left without items are deleted."""
        names = DataValidator.split_tags(tags)
        db = self.db
        with db.session_scope():
            item_id = self._require_managed(filename)
            db.relations.replace(item_id, names)
        return [
            f"Item `{filename}` has been updated with {len(names)} "
            f"{_plural(len(names), 'tag', 'tags')}: `{join_tags(names)}`."
        ]

    def mvt(self, sourcetag: str, targettags: str) -> List[str]:
        """Rename, merge or explode a tag."""
        targets = DataValidator.split_tags(targettags)
        source = DataValidator.normalize_tag(sourcetag)
        db = self.db
        with db.session_scope():
            if not db.tags.exists(sourcetag):
                raise InvalidOperationError(
                    f"Specified tag `{sourcetag}` does not exist in database."
                )
            outcomes = db.tags.move(sourcetag, targets)

        messages = {
            TagMoveAction.RENAMED: "Tag `{source}` is renamed to `{target}`.",
            TagMoveAction.MERGED: "Tag `{source}` is merged into `{target}`",
            TagMoveAction.CREATED: "New tag `{target}` is added.",
            TagMoveAction.APPENDED: "Tag `{target}` is appended.",
            TagMoveAction.SKIPPED: "Tag `{target}` is the same as source tag, skipped.",
        }
        return [
            messages[action].format(source=source, target=target)
            for target, action in outcomes
        ]

    def rmt(self, tags: str) -> List[str]:
        """Delete tags; a single tag must exist, several are deleted as found."""
        names = DataValidator.split_tags(tags)
        db = self.db
        with db.session_scope():
            if len(names) == 1:
                name = names[0]
                if not db.tags.exists(name):
                    raise InvalidArgumentError(f"Specified tag `{name}` doesn't exist in database.")
                db.tags.delete(name)
                return [f"Tag `{name}` has been deleted from database."]

            deleted = db.tags.delete_many(names)
        return [
            f"Tags `{join_tags(deleted)}` "
            f"{_plural(len(deleted), 'has', 'have')} been deleted."
        ]

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def files(self, itemtype: Optional[str] = None) -> List[str]:
        """List items (optionally of one type) with tags and remarks."""
        db = self.db
        with db.session_scope():
            details = db.items.get_details(itemtype)
        return self._detail_rows(details)

    def find(
        self, searchtype: str, searchstring: str, action: Optional[str] = None
    ) -> List[str]:
        """Find items by name substring or by tags (all must match)."""
        search = searchtype.lower()
        if search not in ("name", "tag"):
            raise InvalidArgumentError(f"Unrecognized search type: `{search}`")
        action = (action or "show").lower()
        if action != "show":
            raise InvalidArgumentError(f"Unrecognized action: `{action}`")

        db = self.db
        with db.session_scope():
            if search == "name":
                details = db.items.filter_by_name_detailed(searchstring)
            else:
                details = db.items.filter_by_tags_detailed(
                    DataValidator.split_tags(searchstring)
                )
        return self._detail_rows(details)

    def read(self, itemname: str, linecount: Optional[str] = None) -> List[str]:
        """Read a note's content or a file's lines, managed or not."""
        count = DataValidator.normalize_int(linecount) or 0
        db = self.db
        with db.session_scope():
            item_id = db.items.get_id(itemname)
            detail = db.items.get_detail(item_id) if item_id is not None else None

        if detail is None:
            physical = self.home.path_in_home(self.home.physical_path_for(itemname))
            return [f"(`{itemname}` is not managed)"] + self._read_file(physical, count)

        if detail.content is not None:
            lines = detail.content.splitlines()
            return lines[:count] if count else lines

        physical = self.home.physical_path_for(itemname, detail.id)
        if not self.home.file_exists(physical):
            return [f"Item name `{itemname}` with path `{physical}` doesn't exist at home folder."]
        return self._read_file(self.home.path_in_home(physical), count)

    def tags(self) -> List[str]:
        """Tags in use, alphabetically, with ID and usage count."""
        db = self.db
        with db.session_scope():
            usages = db.tags.usage_counts()
            total = db.tags.count()

        header = f"{'ID':<8}{'Name':<64}{'Usage Count':>8}"
        rows = [header, "-" * len(header)]
        for usage in usages:
            rows.append(f"{f'({usage.id})':<8}{usage.name:<64}{f'x{usage.count}':>8}")
        rows.append(f"Total: {total}")
        return rows

    # -------------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------------

    def im(self, sourcepath: str) -> List[str]:
        """Import a TiddlyWiki JSON export as notes, or a folder as files."""
        source = self._import_source(sourcepath)
        extension = source.suffix.lower()
        if extension == ".csv":
            raise InvalidArgumentError("Csv importing is disabled at this moment.")
        if extension == ".json" and source.is_file():
            return self._import_tiddlers(source)
        if source.is_dir():
            return self._import_folder(source)
        return [f"Format for `{source}` is not supported yet or it doesn't exist."]

    def purge(self, flag: Optional[str] = None) -> List[str]:
        """Permanently delete every file marked ``_deleted`` under home."""
        deleted = self.home.find_deleted()
        if not deleted:
            return ["Nothing to purge!"]

        count = len(deleted)
        result: List[str] = []
        if flag != "-f":
            prompt: List[str] = []
            if flag is not None:
                prompt.append(
                    f"Argument {flag} is invalid; To force deleting files without warning, use `-f`."
                )
            prompt.append(
                f"Following {f'files (Count: {count})' if count > 1 else 'file'} "
                "will be deleted permanantly: "
            )
            prompt.extend(f"\t{path}" for path in deleted)
            if self.confirm is None or not self.confirm(prompt):
                return ["Operation is cancelled."]
        else:
            result.append(
                f"Following {_plural(count, 'file', 'files')} will be deleted permanantly: "
            )
            result.extend(f"\t{path}" for path in deleted)

        for path in deleted:
            path.unlink()
        safe_logger(self.logger).log_operation("purge", {"deleted": count})
        result.append(f"{count} {_plural(count, 'file is', 'files are')} permanantly deleted.")
        return result

    # -------------------------------------------------------------------------
    # Advanced
    # -------------------------------------------------------------------------

    def mt(
        self, itemname: str, metaname: Optional[str] = None, value: Optional[str] = None
    ) -> List[str]:
        """List, read or set meta attributes of an item."""
        db = self.db
        with db.session_scope():
            item_id = db.items.get_id(itemname)
            if item_id is None:
                if self.home.file_exists(self.home.physical_path_for(itemname)):
                    raise InvalidArgumentError(
                        f"Specified item `{itemname}` does not exist, i.e. it is not managed."
                    )
                raise InvalidArgumentError(
                    f"Specified item `{itemname}` is not managed and it doesn't exist in Home folder."
                )

            if metaname is None:
                metas = db.items.get_metas(item_id)
                rows = [itemname, "-" * len(itemname)]
                for key, meta_value in metas.items():
                    rows.append(f"{limit(str(key), 20):<20}: {limit(str(meta_value), 60):<60}")
                rows.append(f"Total: {len(metas)}")
                return rows

            if value is None:
                meta_value = db.items.get_meta(item_id, metaname)
                if meta_value is None:
                    raise InvalidArgumentError(
                        f"Specified meta `{metaname}` doesn't exist on item `{itemname}`."
                    )
                return [f"{metaname}: ", str(meta_value)]

            db.items.set_meta(item_id, metaname, value)
        return [f"Meta attribute `{metaname}` for item `{itemname}` is set to `{value}`."]

    # -------------------------------------------------------------------------
    # Misc.
    # -------------------------------------------------------------------------

    def new(self) -> List[str]:
        path = self.db.initialize_schema()
        return [f"Database generated at {path}"]

    def cf(self, key: Optional[str] = None, value: Optional[str] = None) -> List[str]:
        """List settings, read one, or set one."""
        db = self.db
        with db.session_scope():
            if key is None:
                rows = ["Configurations", "-" * len("Configurations")]
                configurations = db.config.get_all()
                for row in configurations:
                    comment = f" - {row.comment}" if row.comment else ""
                    rows.append(f"{row.key} ({row.type}){comment}")
                count = len(configurations)
                rows.append(
                    f"Total: {count} {_plural(count, 'configuration', 'configurations')}."
                )
                return rows

            if value is None:
                return [f"{key}:", db.config.get(key) or ""]

            db.config.set(key, value)
        return [f"{key} is set to `{value}`."]

    def status(self) -> List[str]:
        """Unmanaged files directly under home (folders are not checked)."""
        files = [name for name in self.home.list_files() if not name.endswith(DELETED_SUFFIX)]
        directories = self.home.list_dirs()
        db = self.db
        with db.session_scope():
            managed = set(db.items.all_names())

        result = [
            f"Home: {self.home_dir}",
            f"{len(files)} {_plural(len(files), 'file', 'files')} on disk; "
            f"{len(directories)} {_plural(len(directories), 'directory', 'directories')} on disk.",
            SEPARATOR,
        ]
        new_files = [name for name in files if name not in managed]
        result.extend(f"[New] {name}" for name in new_files)
        result.append(
            f"{len(new_files)} new files. "
            f"{len(managed)} {_plural(len(managed), 'item', 'items')} in database."
        )
        return result

    def help(self, commandname: Optional[str] = None) -> List[str]:
        """Command list grouped by category, or detailed help for one command."""
        if commandname is not None:
            spec = get_spec(commandname)
            if spec is None:
                raise InvalidArgumentError(f"Command `{commandname}` is not recognized.")
            return spec.help_lines()

        groups: Dict[str, List[CommandSpec]] = {}
        for spec in sorted(COMMANDS, key=lambda s: s.name):
            groups.setdefault(spec.category, []).append(spec)

        lines = ["Available Commands: "]
        for category, specs in groups.items():
            for index, spec in enumerate(specs):
                label = category if index == 0 else ""
                lines.append(f"{label:<10}{spec.name} - {spec.description}")
        return lines

    def doc(self, path: Optional[str] = None) -> List[str]:
        """Write the command list and every command's help to a file in home."""
        lines = self.help()
        for name in sorted(REGISTRY):
            lines.append("")
            lines.extend(self.help(name))
        target = self.home.write_text(path or DEFAULT_DOCUMENT, lines)
        return [f"Document generated at {target}"]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_managed(self, filename: str) -> int:
        item_id = self.db.items.get_id(filename)
        if item_id is None:
            raise InvalidOperationError(f"Specified file `{filename}` is not managed in database.")
        return item_id

    @staticmethod
    def _tags_updated(filename: str, all_tags: Sequence[str]) -> str:
        return (
            f"File `{filename}` has been updated with a total of {len(all_tags)} "
            f"{_plural(len(all_tags), 'tag', 'tags')}: `{join_tags(all_tags)}`."
        )

    def _bring_into_home(self, itemname: str) -> str:
        """
        Resolve the item name for ``add``, copying or moving foreign paths in.

        Returns:
            Item name relative to home; folders end with ``/``
        """
        candidate = Path(itemname).expanduser()
        if candidate.is_absolute() and self.home.relative(candidate) is None:
            name = candidate.name
            if candidate.is_file():
                if self.home.file_exists(name):
                    raise InvalidArgumentError(
                        f"Specified path `{itemname}` contains itemname `{name}` "
                        "that already exist in home directory."
                    )
                self.home.copy_in(candidate, name)
                return name
            if candidate.is_dir():
                self.home.move_dir_in(candidate, name)
                return f"{name}/"
            raise InvalidArgumentError(f"Specified item `{itemname}` doesn't exist on disk.")

        name = self.home.relative(candidate)
        if self.home.dir_exists(name):
            return name.rstrip("/\\") + "/"
        if self.home.file_exists(self.home.physical_path_for(name)):
            return name
        raise InvalidArgumentError(
            f"Specified item `{itemname}` doesn't exist in Home folder ({self.home_dir}); "
            f"Notice current working directory is `{os.getcwd()}`. "
            "Use an absolute path instead to avoid potential confusion."
        )

    def _file_meta(self, name: str, item_id: int) -> Dict[str, Union[int, str]]:
        physical = self.home.physical_path_for(name, item_id)
        return {"Size": self.home.file_size(physical), "MD5": self.home.file_hash(physical)}

    def _add_all(self, tags: Optional[str]) -> List[str]:
        """
        Add every unmanaged file directly under home.

        Files whose on-disk name is not the physical name the naming
        engine gives them (reserved or invalid characters, over-long
        names) are skipped with a warning line.
        """
        db = self.db
        new_files: List[str] = []
        skipped: List[str] = []
        with db.session_scope():
            managed = set(db.items.all_names())
            for name in self.home.list_files():
                if name in managed:
                    continue
                if self.home.physical_path_for(name) != name:
                    skipped.append(name)
                else:
                    new_files.append(name)
            created = db.items.add_many(new_files)
            for item in created:
                db.items.set_metas(item.id, self._file_meta(item.name, item.id))
            if tags is not None and created:
                tag_names = DataValidator.split_tags(tags)
                db.relations.batch_attach({item.id: tag_names for item in created})
            count = db.items.count()

        if skipped:
            safe_logger(self.logger).log_warning(
                "Add skipped files without a matching physical name", {"files": skipped}
            )
        result = [f"Add {len(new_files)} files", SEPARATOR]
        result.extend(f"[Added] `{name}`" for name in new_files)
        result.extend(
            f"[Skipped] `{name}` cannot be stored under its own name; rename it first."
            for name in skipped
        )
        result.append(f"Total: {count} {_plural(count, 'item', 'items')} in database.")
        return result

    @staticmethod
    def _detail_rows(details: List[ItemDetail]) -> List[str]:
        header = (
            f"{'ID':<8}{'Add Date':<12}{'Name (Alphabetical order)':<40}"
            f"{'Rev. Time':<18}{'Rev. Cnt':>8}"
        )
        rows = [header, "-" * len(header)]
        for detail in details:
            name = detail.name if detail.name is not None else f"Knowledge #{detail.id}"
            revisions = f"x{detail.revision_count}" if detail.revision_count else ""
            rows.append(
                f"{f'({detail.id})':<8}{(detail.entry_date or '')[:10]:<12}"
                f"{limit(name, 40):<40}{(detail.revision_time or '')[:16]:<18}"
                f"{revisions:>8}"
            )
            if detail.tags:
                rows.append(f"{'Tags: ':>20}{detail.tags_text:<60}")
            if detail.remark:
                rows.append(f"{'Remark: ':>20}{str(detail.remark):<60}")
        rows.append(f"Total: {len(details)}")
        return rows

    @staticmethod
    def _read_file(path: Path, count: int) -> List[str]:
        if not path.is_file():
            return [f"Specified file {path} doesn't exist."]
        try:
            lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
        except OSError as e:
            return [f"Unable to read file: {e}"]
        return lines[:count] if count else lines

    def _import_source(self, sourcepath: str) -> Path:
        """Relative sources name a folder in home if one exists, else the cwd."""
        source = Path(sourcepath).expanduser()
        if source.is_absolute():
            return source
        if self.home.dir_exists(sourcepath):
            return self.home.path_in_home(sourcepath)
        return Path.cwd() / source

    def _import_tiddlers(self, source: Path) -> List[str]:
        tiddlers = Tiddler.load_json(source)
        result: List[str] = []
        db = self.db
        with db.session_scope():
            for tiddler in tiddlers:
                if db.items.exists(tiddler.title):
                    result.append(f"[Warning] `{tiddler.title}` already exist in database.")
                    continue
                try:
                    tags = tiddler.tag_list
                    created = tiddler.created_date
                except ValidationError as e:
                    message = " ".join(str(e).splitlines())
                    result.append(f"{message} - Error when importing `{tiddler.title}`")
                    continue

                item = db.items.add(tiddler.title, tiddler.text)
                db.relations.attach(item.id, tags)
                if created is not None:
                    db.items.change_entry_date(item.id, created)
                result.append(
                    f"`{tiddler.title}` added with {_plural(len(tags), 'tag', 'tags')}: "
                    f"{join_tags(tags)}"
                )
        return result

    def _import_folder(self, source: Path) -> List[str]:
        """
        Flatten a folder into home, tagging each file with its directories.

        Folders inside home are flattened in place: managed files are
        renamed with ``mv`` and new files are moved up and added. Folders
        outside home are copied file by file.
        """
        result: List[str] = []
        source = source.resolve()
        internal = self.home.relative(source) is not None
        tag_root = self.home_dir if internal else source.parent

        for path in walk_files(source):
            tags = join_tags(split_directory_as_tags(path, tag_root))
            try:
                if not internal:
                    result.extend(self.add(str(path), tags))
                    continue

                relative = self.home.relative(path)
                with self.db.session_scope():
                    managed = self.db.items.exists(relative)
                if managed:
                    result.extend(self.mv(relative, path.name))
                elif self.home.file_exists(path.name):
                    result.append(
                        f"Specified path `{path}` contains itemname `{path.name}` "
                        "that already exist in home directory."
                    )
                else:
                    self.home.move(relative, path.name)
                    result.extend(self.add(path.name, tags))
            except (SomewhereError, OSError) as e:
                safe_logger(self.logger).log_warning(
                    "Import skipped a file", {"path": str(path), "error": str(e)}
                )
                result.append(str(e))
        return result
