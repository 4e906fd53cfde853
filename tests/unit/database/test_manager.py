"""Tests for the SomewhereDB facade: schema, session scopes and retries."""
import pytest
from unittest.mock import MagicMock, patch

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from somewhere.core.exceptions import DatabaseError, InvalidOperationError
from somewhere.core.paths import DB_NAME, RELEASE_VERSION
from somewhere.database.manager import SomewhereDB
from somewhere.database.managers import TagManager


class TestSomewhereDBSchema:
    """Tests for home creation."""

    def test_initialize_creates_marker_file(self, home_dir):
        db = SomewhereDB(home_dir)
        try:
            assert db.is_home is False
            path = db.initialize_schema()
            assert path == home_dir / DB_NAME
            assert db.is_home is True
        finally:
            db.dispose()

    def test_tables_and_columns(self, test_db):
        """The persisted schema uses the fixed table and column names."""
        inspector = inspect(test_db.engine)
        assert set(inspector.get_table_names()) >= {
            "Tag",
            "File",
            "FileTag",
            "Configuration",
            "Log",
            "Revision",
        }
        columns = [c["name"] for c in inspector.get_columns("File")]
        assert columns == ["ID", "Name", "Content", "Meta", "EntryDate"]
        assert inspector.get_pk_constraint("FileTag")["constrained_columns"] == [
            "FileID",
            "TagID",
        ]
        assert inspector.get_pk_constraint("Revision")["constrained_columns"] == [
            "FileID",
            "RevisionID",
        ]

    def test_initialize_twice_raises(self, test_db):
        with pytest.raises(InvalidOperationError) as exc_info:
            test_db.initialize_schema()
        assert "already exist" in str(exc_info.value)

    def test_defaults_seeded(self, test_db):
        with test_db.session_scope():
            assert test_db.config.get("InitialVersion") == RELEASE_VERSION
            assert test_db.config.get("ReleaseVersion") == RELEASE_VERSION
            assert test_db.config.get_bool("RegisterCommits") is True


class TestSomewhereDBSessionScope:
    """Tests for session_scope and manager binding."""

    def test_not_a_home_raises(self, home_dir):
        db = SomewhereDB(home_dir)
        with pytest.raises(InvalidOperationError) as exc_info:
            with db.session_scope():
                pass
        assert "not in a Home directory" in str(exc_info.value)

    def test_managers_bound_inside_scope(self, test_db):
        with test_db.session_scope() as session:
            assert isinstance(test_db.tags, TagManager)
            assert test_db.tags.session is session
            assert test_db.relations.tags is test_db.tags
            assert test_db.items.session is session
            assert test_db.config.session is session

    def test_managers_unavailable_outside_scope(self, test_db):
        """Manager properties raise DatabaseError without a session."""
        for name in ("tags", "items", "relations", "config"):
            with pytest.raises(DatabaseError):
                getattr(test_db, name)

    def test_commit_persists(self, test_db):
        with test_db.session_scope():
            test_db.tags.get_or_create("work")
        with test_db.session_scope():
            assert test_db.tags.exists("work") is True

    def test_rollback_on_exception(self, test_db):
        """A failing block leaves no partial writes."""
        with pytest.raises(ValueError, match="Test error"):
            with test_db.session_scope():
                item = test_db.items.add("a.txt")
                test_db.relations.attach(item.id, ["work", "urgent"])
                raise ValueError("Test error")

        with test_db.session_scope():
            assert test_db.items.count() == 0
            assert test_db.tags.count() == 0

    def test_session_scope_with_mock_session(self, test_db):
        """Verify commit and close on success with a mocked session."""
        mock_session = MagicMock()
        test_db.SessionLocal = MagicMock(return_value=mock_session)
        test_db._release_recorded = True

        with test_db.session_scope():
            pass

        mock_session.commit.assert_called_once()
        mock_session.rollback.assert_not_called()
        mock_session.close.assert_called_once()


class TestRetry:
    """Tests for BaseManager._execute_with_retry."""

    @patch("somewhere.database.managers.base_manager.time.sleep", autospec=True)
    def test_retries_locked_database(self, mock_sleep, tag_manager):
        operation = MagicMock(
            side_effect=[
                OperationalError("UPDATE", {}, Exception("database is locked")),
                "done",
            ]
        )
        assert tag_manager._execute_with_retry(operation) == "done"
        assert operation.call_count == 2
        mock_sleep.assert_called_once()

    @patch("somewhere.database.managers.base_manager.time.sleep", autospec=True)
    def test_other_operational_errors_raise(self, mock_sleep, tag_manager):
        operation = MagicMock(
            side_effect=OperationalError("SELECT", {}, Exception("no such table"))
        )
        with pytest.raises(OperationalError):
            tag_manager._execute_with_retry(operation)
        mock_sleep.assert_not_called()

    @patch("somewhere.database.managers.base_manager.time.sleep", autospec=True)
    def test_gives_up_after_max_retries(self, mock_sleep, tag_manager):
        operation = MagicMock(
            side_effect=OperationalError("UPDATE", {}, Exception("database is locked"))
        )
        with pytest.raises(OperationalError):
            tag_manager._execute_with_retry(operation, max_retries=3)
        assert operation.call_count == 3
        assert mock_sleep.call_count == 2
