#!/usr/bin/env python3
"""
fs.py
-------------------
Filesystem access scoped to one home directory.

HomeFolder resolves item names to physical paths through the naming
engine and performs the on-disk half of item commands (move, copy,
delete, enumerate). It never touches the database; commands update the
store after the filesystem step succeeds.

Functions:
    get_file_hash: Compute MD5 hash of a file
    is_folder_name: Whether an item name denotes a folder
    split_directory_as_tags: Directory parts of a path, usable as tags

Usage:
    from somewhere.utils.fs import HomeFolder

    home = HomeFolder(Path("~/notes").expanduser())
    if home.file_exists(home.physical_path_for("draft.md")):
        home.move("draft.md", home.new_physical_path_for("final.md", 3, "draft.md"))
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import hashlib
import os
import shutil
from pathlib import Path
from typing import List, Optional

# --- Local imports ---
from somewhere.core.paths import DB_NAME, DELETED_SUFFIX, MAX_PATH_LENGTH
from somewhere.utils.naming import (
    compute_new_physical_name,
    compute_physical_name,
    with_item_id,
)

FOLDER_SEPARATORS = ("/", "\\")


def get_file_hash(file_path: str | Path) -> str:
    """
    Compute MD5 hash of a file.

    Note: MD5 is recorded as item meta for change detection only.

    Raises:
        FileNotFoundError: If file does not exist or is not a regular file.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found or not a regular file: {path}")
    return hashlib.md5(path.read_bytes()).hexdigest()


def is_folder_name(name: Optional[str]) -> bool:
    """Folder items are named with a trailing separator."""
    return bool(name) and name.endswith(FOLDER_SEPARATORS)


def split_directory_as_tags(file_path: str | Path, root: str | Path) -> List[str]:
    """
    Directory components between ``root`` and the file, lower-cased.

    ``split_directory_as_tags("/import/Work/2020/a.txt", "/import")``
    returns ``["work", "2020"]``.
    """
    relative = Path(file_path).relative_to(root)
    return [part.lower() for part in relative.parent.parts]


class HomeFolder:
    """
    Disk operations relative to a home directory.

    Physical names passed to the methods below are relative to the home
    directory and may contain sub-directories (``folder/file.txt``).
    """

    def __init__(self, home_dir: str | Path, max_path_length: int = MAX_PATH_LENGTH):
        self.home_dir = Path(home_dir).resolve()
        self.max_path_length = max_path_length

    @property
    def home_dir_length(self) -> int:
        """Length of the home path including its trailing separator."""
        return len(os.path.join(str(self.home_dir), ""))

    @property
    def db_path(self) -> Path:
        return self.home_dir / DB_NAME

    def path_in_home(self, relative: str | Path) -> Path:
        return self.home_dir / relative

    # ---- Naming ----

    def physical_path_for(self, item_path: str, item_id: Optional[int] = None) -> str:
        """
        Physical relative path for an item name.

        Only the last path component goes through the naming engine;
        folder items (trailing separator) map to the folder itself. With
        ``item_id`` the ``#<id>`` form is returned when that file exists,
        since the item was given it on a collision.
        """
        if is_folder_name(item_path):
            return item_path.rstrip("/\\")
        directory, filename = os.path.split(item_path)
        computed = compute_physical_name(
            filename, self.home_dir_length, self.max_path_length
        )
        physical = computed.name
        if item_id is not None:
            suffixed = with_item_id(computed, item_id)
            if self.path_in_home(os.path.join(directory, suffixed)).exists():
                physical = suffixed
        return os.path.join(directory, physical) if directory else physical

    def new_physical_path_for(
        self, item_path: str, item_id: int, old_physical_name: Optional[str] = None
    ) -> str:
        """
        Physical relative path for an item being renamed or created.

        Collisions are checked in the target's own parent directory; see
        ``compute_new_physical_name`` for the ``#<id>`` suffix rule.
        """
        directory, filename = os.path.split(item_path.rstrip("/\\"))
        parent = self.path_in_home(directory)
        old_name = None
        if old_physical_name and os.path.dirname(old_physical_name) == directory:
            old_name = os.path.basename(old_physical_name)
        physical = compute_new_physical_name(
            filename,
            item_id,
            self.home_dir_length,
            lambda name: (parent / name).exists(),
            old_name,
            self.max_path_length,
        )
        return os.path.join(directory, physical) if directory else physical

    def relative(self, path: str | Path) -> Optional[str]:
        """
        Path relative to home, or None if ``path`` is outside home.

        Relative input is returned unchanged.
        """
        candidate = Path(path)
        if not candidate.is_absolute():
            return str(path)
        try:
            return str(candidate.resolve().relative_to(self.home_dir))
        except ValueError:
            return None

    # ---- Queries ----

    def file_exists(self, relative: str | Path) -> bool:
        return self.path_in_home(relative).is_file()

    def dir_exists(self, relative: str | Path) -> bool:
        return self.path_in_home(relative).is_dir()

    def list_files(self) -> List[str]:
        """Names of files directly under home, sorted, database excluded."""
        return sorted(
            entry.name
            for entry in self.home_dir.iterdir()
            if entry.is_file() and entry.name != DB_NAME
        )

    def list_dirs(self) -> List[str]:
        """Names of directories directly under home, sorted."""
        return sorted(entry.name for entry in self.home_dir.iterdir() if entry.is_dir())

    def find_deleted(self) -> List[Path]:
        """Files anywhere under home whose name ends with ``_deleted``."""
        return [
            path
            for path in walk_files(self.home_dir)
            if path.name.endswith(DELETED_SUFFIX)
        ]

    def file_size(self, relative: str | Path) -> int:
        return self.path_in_home(relative).stat().st_size

    def file_hash(self, relative: str | Path) -> str:
        return get_file_hash(self.path_in_home(relative))

    # ---- Mutations ----

    def move(self, source: str, target: str) -> None:
        """Rename within home, creating target directories as needed."""
        if source == target:
            return
        destination = self.path_in_home(target)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(self.path_in_home(source)), str(destination))

    def copy_in(self, source: str | Path, name: str) -> None:
        """Copy an outside file into home under ``name``."""
        shutil.copy2(str(source), str(self.path_in_home(name)))

    def move_dir_in(self, source: str | Path, name: str) -> None:
        """Move an outside directory into home under ``name``."""
        shutil.move(str(source), str(self.path_in_home(name)))

    def delete(self, relative: str | Path) -> None:
        """Delete a file, or a folder with everything inside it."""
        path = self.path_in_home(relative)
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()

    def write_text(self, relative: str | Path, lines: List[str]) -> Path:
        path = self.path_in_home(relative)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path


def walk_files(directory: Path) -> List[Path]:
    """
    All files under ``directory``: sub-directories first, then files,
    each level sorted by name.
    """
    result: List[Path] = []
    entries = sorted(directory.iterdir())
    for entry in entries:
        if entry.is_dir():
            result.extend(walk_files(entry))
    result.extend(entry for entry in entries if entry.is_file())
    return result
