"""
test_commands.py
----------------
Unit tests for the Commands facade.

Each command runs against a real home directory and database created in a
temporary folder; assertions check both the returned lines and the state
left on disk and in the store.
"""
import hashlib
import json

import pytest

from somewhere.commands import Commands
from somewhere.core.exceptions import (
    InvalidArgumentError,
    InvalidOperationError,
    ValidationError,
)
from somewhere.core.paths import DB_NAME
from somewhere.database.models import ItemType


@pytest.fixture
def report(commands, home_dir, write_file):
    """A managed file ``report.txt`` tagged work and urgent."""
    write_file(home_dir / "report.txt", "line one\nline two\nline three\n")
    commands.add("report.txt", "work,urgent")
    return home_dir / "report.txt"


@pytest.fixture
def note(commands):
    commands.create("ideas", "- milk\n- bread", "home, Shopping")
    return "ideas"


def item_tags(commands, name):
    db = commands.db
    with db.session_scope():
        return db.relations.get_tags(db.items.get_id(name))


class TestCommandsAdd:
    """Test add."""

    def test_add_file(self, commands, home_dir, write_file):
        write_file(home_dir / "report.txt", "abc")
        result = commands.add("report.txt")
        assert result == ["Item `report.txt` added to database with a total of 1 item."]

        db = commands.db
        with db.session_scope():
            item = db.items.get("report.txt")
            assert item.item_type is ItemType.FILE
            metas = db.items.get_metas(item.id)
        assert metas == {"Size": 3, "MD5": hashlib.md5(b"abc").hexdigest()}

    def test_add_with_tags_scenario(self, commands, report):
        """Add, untag, remove and clean up leaves an empty store."""
        db = commands.db
        with db.session_scope():
            assert db.items.count() == 1
            assert db.tags.count() == 2

        assert commands.untag("report.txt", "urgent") == [
            "File `report.txt` has been updated with a total of 1 tag: `work`."
        ]
        assert item_tags(commands, "report.txt") == ["work"]

        commands.rm("report.txt")
        with db.session_scope():
            assert db.items.count() == 0
            db.tags.clean_dangling()
        with db.session_scope():
            assert db.tags.count() == 0

    def test_add_twice(self, commands, report):
        assert commands.add("report.txt") == ["Item `report.txt` already added in database."]

    def test_add_missing_file(self, commands):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.add("missing.txt")
        assert "doesn't exist in Home folder" in str(exc_info.value)

    def test_add_external_file_copies(self, commands, home_dir, outside_dir, write_file):
        source = write_file(outside_dir / "ext.txt", "x")
        assert commands.add(str(source))[0].startswith("Item `ext.txt` added")
        assert source.exists()
        assert (home_dir / "ext.txt").read_text() == "x"

    def test_add_external_file_name_taken(self, commands, home_dir, outside_dir, write_file):
        write_file(home_dir / "ext.txt")
        source = write_file(outside_dir / "ext.txt")
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.add(str(source))
        assert "already exist in home directory" in str(exc_info.value)

    def test_add_external_folder_moves(self, commands, home_dir, outside_dir, write_file):
        write_file(outside_dir / "project" / "readme.md")
        commands.add(str(outside_dir / "project"))
        assert not (outside_dir / "project").exists()
        assert (home_dir / "project" / "readme.md").exists()

        db = commands.db
        with db.session_scope():
            assert db.items.get("project/").item_type is ItemType.FOLDER

    def test_add_internal_folder(self, commands, home_dir):
        (home_dir / "docs").mkdir()
        assert commands.add("docs")[0].startswith("Item `docs/` added")

    def test_add_all(self, commands, home_dir, write_file, report):
        write_file(home_dir / "b.txt")
        write_file(home_dir / "a.txt")
        (home_dir / "sub").mkdir()

        result = commands.add("*", "batch")

        assert result == [
            "Add 2 files",
            "------------",
            "[Added] `a.txt`",
            "[Added] `b.txt`",
            "Total: 3 items in database.",
        ]
        assert item_tags(commands, "a.txt") == ["batch"]
        assert item_tags(commands, "b.txt") == ["batch"]
        assert item_tags(commands, "report.txt") == ["urgent", "work"]

    def test_add_all_skips_names_without_physical_form(self, commands, home_dir, write_file):
        write_file(home_dir / "a:b.txt")
        write_file(home_dir / "plain.txt")

        result = commands.add("*")

        assert result == [
            "Add 1 files",
            "------------",
            "[Added] `plain.txt`",
            "[Skipped] `a:b.txt` cannot be stored under its own name; rename it first.",
            "Total: 1 item in database.",
        ]
        db = commands.db
        with db.session_scope():
            assert db.items.exists("plain.txt")
            assert not db.items.exists("a:b.txt")


class TestCommandsCreate:
    """Test create."""

    def test_create_note(self, commands):
        result = commands.create("ideas", "- milk", "home, Shopping")
        assert result == ["Note `ideas` has been created with 2 tags: `home, shopping`."]

    def test_create_knowledge(self, commands):
        result = commands.create("", "water boils at 100C", "science")
        assert result[0].startswith("Knowledge #")
        assert result[0].endswith("has been created with 1 tag: `science`.")

        db = commands.db
        with db.session_scope():
            assert db.items.count(ItemType.KNOWLEDGE) == 1

    def test_create_over_physical_file(self, commands, report):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.create("report.txt", "x", "y")
        assert "as a physical file" in str(exc_info.value)

    def test_create_duplicate_note(self, commands, note):
        with pytest.raises(InvalidOperationError):
            commands.create("ideas", "again", "x")


class TestCommandsMv:
    """Test mv."""

    def test_rename_physical(self, commands, report, home_dir):
        result = commands.mv("report.txt", "final.txt")
        assert result == ["File (Physical) `report.txt` has been renamed to `final.txt`."]
        assert not report.exists()
        assert (home_dir / "final.txt").exists()
        assert item_tags(commands, "final.txt") == ["urgent", "work"]

    def test_rename_escapes_physical_name(self, commands, report, home_dir):
        commands.mv("report.txt", "Q3: plan?.txt")
        assert (home_dir / "Q3_ plan_.txt").exists()

    def test_rename_virtual(self, commands, note):
        assert commands.mv("ideas", "plans") == [
            "Virtual file `ideas` has been renamed to `plans`."
        ]

    def test_same_name(self, commands, report):
        assert commands.mv("report.txt", "report.txt") == [
            "Filename `report.txt` is the same as new filename: `report.txt`."
        ]

    def test_unmanaged(self, commands):
        with pytest.raises(InvalidOperationError):
            commands.mv("ghost.txt", "other.txt")

    def test_target_used(self, commands, report, note):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.mv("report.txt", "ideas")
        assert str(exc_info.value) == "Itemname `ideas` is already used."

    def test_rename_folder(self, commands, home_dir, write_file):
        write_file(home_dir / "docs" / "inner.txt")
        commands.add("docs")
        commands.mv("docs/", "papers/")
        assert (home_dir / "papers" / "inner.txt").exists()
        assert not (home_dir / "docs").exists()

    def test_long_names_with_same_physical_name(self, commands, home_dir, write_file):
        """Names truncating alike get distinct files that read back correctly."""
        first_name = "x" * 300 + "1.txt"
        second_name = "x" * 300 + "2.txt"
        write_file(home_dir / "seed1.txt", "first")
        write_file(home_dir / "seed2.txt", "second")
        commands.add("seed1.txt")
        commands.add("seed2.txt")

        commands.mv("seed1.txt", first_name)
        commands.mv("seed2.txt", second_name)

        db = commands.db
        with db.session_scope():
            first_id = db.items.get_id(first_name)
            second_id = db.items.get_id(second_name)
        first_path = commands.home.physical_path_for(first_name, first_id)
        second_path = commands.home.physical_path_for(second_name, second_id)

        assert first_path != second_path
        assert second_path.endswith(f"..#{second_id}.txt")
        assert (home_dir / first_path).read_text() == "first"
        assert (home_dir / second_path).read_text() == "second"
        assert commands.read(first_name) == ["first"]
        assert commands.read(second_name) == ["second"]


class TestCommandsRm:
    """Test rm."""

    def test_mark_deleted(self, commands, report, home_dir):
        result = commands.rm("report.txt")
        assert result == ['File `report.txt` is marked as "_deleted".']
        assert not report.exists()
        assert (home_dir / "report.txt_deleted").exists()

    def test_force_delete(self, commands, report):
        assert commands.rm("report.txt", "-f") == ["File `report.txt` is forever gone (deleted)."]
        assert not report.exists()

    def test_remove_note(self, commands, note):
        assert commands.rm("ideas") == ["Note `ideas` has been deleted."]

    def test_unmanaged(self, commands):
        with pytest.raises(InvalidOperationError):
            commands.rm("ghost.txt")

    def test_missing_on_disk(self, commands, report):
        report.unlink()
        with pytest.raises(InvalidArgumentError):
            commands.rm("report.txt")

        # The failed command left the item in place
        db = commands.db
        with db.session_scope():
            assert db.items.exists("report.txt")

    def test_mark_twice_uses_item_id(self, commands, home_dir, write_file):
        """A second ``_deleted`` copy of the same name gets the #<id> form."""
        write_file(home_dir / "a.txt")
        commands.add("a.txt")
        commands.rm("a.txt")
        write_file(home_dir / "a.txt")
        commands.add("a.txt")
        commands.rm("a.txt")

        deleted = sorted(p.name for p in home_dir.iterdir() if "_deleted" in p.name)
        assert len(deleted) == 2
        assert "a.txt_deleted" in deleted


class TestCommandsTagging:
    """Test tag, untag, update, mvt and rmt."""

    def test_tag(self, commands, report):
        assert commands.tag("report.txt", "Home") == [
            "File `report.txt` has been updated with a total of 3 tags: `home, urgent, work`."
        ]

    def test_tag_unmanaged(self, commands):
        with pytest.raises(InvalidOperationError) as exc_info:
            commands.tag("ghost.txt", "x")
        assert "not managed" in str(exc_info.value)

    def test_update_replaces_and_cleans(self, commands, report):
        assert commands.update("report.txt", "home") == [
            "Item `report.txt` has been updated with 1 tag: `home`."
        ]
        db = commands.db
        with db.session_scope():
            assert [t.name for t in db.tags.get_all()] == ["home"]

    def test_mvt_rename(self, commands, report):
        assert commands.mvt("work", "job") == ["Tag `work` is renamed to `job`."]
        assert item_tags(commands, "report.txt") == ["job", "urgent"]

    def test_mvt_merge(self, commands, report):
        assert commands.mvt("work", "urgent") == ["Tag `work` is merged into `urgent`"]
        assert item_tags(commands, "report.txt") == ["urgent"]

    def test_mvt_explosion(self, commands, report):
        assert commands.mvt("Work", "job, office, urgent") == [
            "Tag `work` is renamed to `job`.",
            "New tag `office` is added.",
            "Tag `urgent` is appended.",
        ]
        assert item_tags(commands, "report.txt") == ["job", "office", "urgent"]

    def test_mvt_missing(self, commands):
        with pytest.raises(InvalidOperationError):
            commands.mvt("ghost", "other")

    def test_rmt_single(self, commands, report):
        assert commands.rmt("work") == ["Tag `work` has been deleted from database."]
        assert item_tags(commands, "report.txt") == ["urgent"]

    def test_rmt_single_missing(self, commands):
        with pytest.raises(InvalidArgumentError):
            commands.rmt("ghost")

    def test_rmt_many(self, commands, report):
        assert commands.rmt("work, urgent, ghost") == [
            "Tags `urgent, work` have been deleted."
        ]


class TestCommandsDisplay:
    """Test files, find, read and tags."""

    def test_files(self, commands, report, note):
        lines = commands.files()
        assert lines[0].startswith("ID")
        assert set(lines[1]) == {"-"}
        assert lines[-1] == "Total: 2"
        tag_lines = [line.strip() for line in lines if "Tags:" in line]
        assert tag_lines == ["Tags: home, shopping", "Tags: urgent, work"]

    def test_files_by_type(self, commands, report, note):
        lines = commands.files("note")
        assert lines[-1] == "Total: 1"
        assert any("ideas" in line for line in lines)

    def test_files_unknown_type(self, commands):
        with pytest.raises(ValidationError):
            commands.files("picture")

    def test_files_shows_remark(self, commands, report):
        commands.mt("report.txt", "Remark", "quarterly")
        assert any(line.strip() == "Remark: quarterly" for line in commands.files())

    def test_find_by_name(self, commands, report, note):
        lines = commands.find("name", "rep")
        assert lines[-1] == "Total: 1"
        assert any("report.txt" in line for line in lines)

    def test_find_by_tags_requires_all(self, commands, report, note):
        assert commands.find("tag", "work, urgent")[-1] == "Total: 1"
        assert commands.find("TAG", "work, home")[-1] == "Total: 0"

    def test_find_invalid(self, commands):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.find("date", "x")
        assert "Unrecognized search type" in str(exc_info.value)
        with pytest.raises(InvalidArgumentError):
            commands.find("name", "x", "delete")

    def test_read_note(self, commands, note):
        assert commands.read("ideas") == ["- milk", "- bread"]
        assert commands.read("ideas", "1") == ["- milk"]

    def test_read_file(self, commands, report):
        assert commands.read("report.txt", "2") == ["line one", "line two"]

    def test_read_unmanaged(self, commands, home_dir, write_file):
        write_file(home_dir / "loose.txt", "hello\n")
        assert commands.read("loose.txt") == ["(`loose.txt` is not managed)", "hello"]

    def test_read_unmanaged_missing(self, commands):
        lines = commands.read("nothing.txt")
        assert lines[0] == "(`nothing.txt` is not managed)"
        assert "doesn't exist" in lines[1]

    def test_read_managed_missing_on_disk(self, commands, report):
        report.unlink()
        assert "doesn't exist at home folder" in commands.read("report.txt")[0]

    def test_read_bad_linecount(self, commands, note):
        with pytest.raises(ValidationError):
            commands.read("ideas", "many")

    def test_tags(self, commands, report, note):
        lines = commands.tags()
        rows = lines[2:-1]
        assert [row.split()[1] for row in rows] == ["home", "shopping", "urgent", "work"]
        assert all(row.rstrip().endswith("x1") for row in rows)
        assert lines[-1] == "Total: 4"


class TestCommandsImport:
    """Test im."""

    def test_import_tiddlers(self, commands, outside_dir):
        export = outside_dir / "export.json"
        export.write_text(
            json.dumps(
                [
                    {
                        "title": "Groceries",
                        "text": "milk",
                        "tags": "Home [[to buy]]",
                        "created": "20200315093000123",
                    },
                    {"title": "Broken", "text": "x", "created": "2020"},
                ]
            ),
            encoding="utf-8",
        )

        result = commands.im(str(export))

        assert result[0] == "`Groceries` added with tags: home, to buy"
        assert result[1] == "Invalid tiddler created date: 2020 - Error when importing `Broken`"
        db = commands.db
        with db.session_scope():
            item = db.items.get("Groceries")
            assert item.content == "milk"
            assert item.entry_date == "2020-03-15 09:30:00.123"
            assert db.items.exists("Broken") is False

        assert commands.im(str(export))[0] == "[Warning] `Groceries` already exist in database."

    def test_import_csv_disabled(self, commands, outside_dir, write_file):
        source = write_file(outside_dir / "data.csv", "a,b\n")
        with pytest.raises(InvalidArgumentError):
            commands.im(str(source))

    def test_import_unsupported(self, commands, outside_dir):
        result = commands.im(str(outside_dir / "missing.txt"))
        assert "is not supported yet or it doesn't exist" in result[0]

    def test_import_external_folder(self, commands, home_dir, outside_dir, write_file):
        """External folders are copied flat with their directory names as tags."""
        write_file(outside_dir / "Import" / "Work" / "a.txt", "a")
        write_file(outside_dir / "Import" / "b.txt", "b")

        commands.im(str(outside_dir / "Import"))

        assert (home_dir / "a.txt").exists()
        assert (home_dir / "b.txt").exists()
        assert item_tags(commands, "a.txt") == ["import", "work"]
        assert item_tags(commands, "b.txt") == ["import"]

    def test_import_internal_folder(self, commands, home_dir, write_file):
        """Folders inside home are flattened in place."""
        write_file(home_dir / "Projects" / "Alpha" / "x.txt", "x")
        write_file(home_dir / "Projects" / "y.txt", "y")
        commands.add("Projects/y.txt")

        result = commands.im("Projects")

        assert (home_dir / "x.txt").read_text() == "x"
        assert (home_dir / "y.txt").read_text() == "y"
        assert item_tags(commands, "x.txt") == ["alpha", "projects"]
        assert any("has been renamed to `y.txt`" in line for line in result)
        db = commands.db
        with db.session_scope():
            assert db.items.exists("Projects/y.txt") is False
            assert db.items.exists("y.txt") is True

    def test_import_internal_conflict_reported(self, commands, home_dir, write_file):
        write_file(home_dir / "x.txt", "top")
        write_file(home_dir / "Projects" / "x.txt", "inner")
        result = commands.im("Projects")
        assert "already exist in home directory" in result[0]
        assert (home_dir / "x.txt").read_text() == "top"


class TestCommandsPurge:
    """Test purge."""

    def test_nothing_to_purge(self, commands):
        assert commands.purge() == ["Nothing to purge!"]

    def test_force(self, commands, home_dir, write_file):
        marked = write_file(home_dir / "a.txt_deleted")
        result = commands.purge("-f")
        assert result[0] == "Following file will be deleted permanantly: "
        assert result[-1] == "1 file is permanantly deleted."
        assert not marked.exists()

    def test_cancelled_without_confirmation(self, commands, home_dir, write_file):
        marked = write_file(home_dir / "a.txt_deleted")
        assert commands.purge() == ["Operation is cancelled."]
        assert marked.exists()

    def test_confirmed(self, home_dir, write_file):
        shown = []

        def confirm(lines):
            shown.extend(lines)
            return True

        with Commands(home_dir, confirm=confirm) as facade:
            facade.new()
            write_file(home_dir / "a.txt_deleted")
            write_file(home_dir / "sub" / "b.txt_deleted")
            result = facade.purge("-x")

        assert shown[0].startswith("Argument -x is invalid")
        assert shown[1].startswith("Following files (Count: 2)")
        assert result == ["2 files are permanantly deleted."]
        assert not (home_dir / "a.txt_deleted").exists()


class TestCommandsMeta:
    """Test mt."""

    def test_list(self, commands, report):
        lines = commands.mt("report.txt")
        assert lines[0] == "report.txt"
        assert lines[2].startswith("Size")
        assert lines[-1] == "Total: 2"

    def test_set_and_read(self, commands, report):
        assert commands.mt("report.txt", "Remark", "q3") == [
            "Meta attribute `Remark` for item `report.txt` is set to `q3`."
        ]
        assert commands.mt("report.txt", "Remark") == ["Remark: ", "q3"]

    def test_missing_meta(self, commands, report):
        with pytest.raises(InvalidArgumentError):
            commands.mt("report.txt", "Owner")

    def test_unmanaged_file(self, commands, home_dir, write_file):
        write_file(home_dir / "loose.txt")
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.mt("loose.txt")
        assert "it is not managed" in str(exc_info.value)

    def test_nonexistent(self, commands):
        with pytest.raises(InvalidArgumentError) as exc_info:
            commands.mt("ghost.txt")
        assert "doesn't exist in Home folder" in str(exc_info.value)


class TestCommandsMisc:
    """Test new, cf, status, help and doc."""

    def test_new(self, tmp_dir):
        home = tmp_dir / "fresh"
        home.mkdir()
        with Commands(home) as facade:
            result = facade.new()
        assert result == [f"Database generated at {home / DB_NAME}"]

    def test_new_twice(self, commands):
        with pytest.raises(InvalidOperationError):
            commands.new()

    def test_not_a_home(self, tmp_dir):
        with Commands(tmp_dir) as facade:
            with pytest.raises(InvalidOperationError) as exc_info:
                facade.files()
        assert "Use `new` command" in str(exc_info.value)

    def test_cf(self, commands):
        lines = commands.cf()
        assert lines[0] == "Configurations"
        assert any(line.startswith("RegisterCommits (boolean)") for line in lines)
        assert commands.cf("Editor", "vim") == ["Editor is set to `vim`."]
        assert commands.cf("Editor") == ["Editor:", "vim"]
        assert commands.cf("Missing") == ["Missing:", ""]

    def test_status(self, commands, home_dir, write_file, report):
        write_file(home_dir / "new.txt")
        write_file(home_dir / "old.txt_deleted")
        (home_dir / "sub").mkdir()

        lines = commands.status()

        assert lines[0] == f"Home: {home_dir}"
        assert lines[1] == "2 files on disk; 1 directory on disk."
        assert "[New] new.txt" in lines
        assert lines[-1] == "1 new files. 1 item in database."

    def test_help(self, commands):
        lines = commands.help()
        assert lines[0] == "Available Commands: "
        assert lines[1] == "File      add - Add an item to home."

    def test_help_command(self, commands):
        assert commands.help("TAG")[0] == "tag - Tag a specified file."

    def test_help_unknown(self, commands):
        with pytest.raises(InvalidArgumentError):
            commands.help("nope")

    def test_doc(self, commands, home_dir):
        result = commands.doc()
        document = home_dir / "SomewhereDoc.txt"
        assert result == [f"Document generated at {document}"]
        text = document.read_text(encoding="utf-8")
        assert "tag - Tag a specified file." in text
        assert "Available Commands: " in text
