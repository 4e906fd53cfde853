"""
test_relation_manager.py
------------------------
Unit tests for RelationManager operations.

Tests attaching, detaching and replacing an item's tags, and the batch
attach used by imports.
"""
import pytest
from unittest.mock import MagicMock

from sqlalchemy import func, select

from somewhere.core.exceptions import NotFoundError
from somewhere.core.logging_manager import SomewhereLogger
from somewhere.database.managers import RelationManager
from somewhere.database.models import Tag, file_tags


def pair_count(db_session):
    return db_session.scalar(select(func.count()).select_from(file_tags))


@pytest.fixture
def report(item_manager):
    return item_manager.add("report.txt")


class TestRelationManagerAttach:
    """Test attach()."""

    def test_attach_creates_tags(self, relation_manager, tag_manager, report):
        tags = relation_manager.attach(report.id, ["Work", "urgent"])
        assert tags == ["urgent", "work"]
        assert tag_manager.count() == 2

    def test_attach_skips_existing_pairs(self, relation_manager, report, db_session):
        """Attaching a tag twice never inserts a duplicate pair."""
        relation_manager.attach(report.id, ["work"])
        tags = relation_manager.attach(report.id, ["work", "work", "home"])
        assert tags == ["home", "work"]
        assert pair_count(db_session) == 2

    def test_attach_nothing(self, relation_manager, report):
        assert relation_manager.attach(report.id, ["", "  "]) == []

    def test_attach_unknown_item_raises(self, relation_manager):
        with pytest.raises(NotFoundError):
            relation_manager.attach(999, ["work"])

    def test_default_tag_manager(self, db_session, report):
        """A RelationManager builds its own TagManager when none is given."""
        relations = RelationManager(db_session)
        assert relations.attach(report.id, ["solo"]) == ["solo"]


class TestRelationManagerDetach:
    """Test detach() and detach_all()."""

    def test_detach(self, relation_manager, tag_manager, report):
        relation_manager.attach(report.id, ["work", "urgent"])
        assert relation_manager.detach(report.id, ["URGENT"]) == ["work"]
        # The tag row stays until dangling tags are cleaned
        assert tag_manager.exists("urgent") is True

    def test_detach_ignores_unrelated_tags(self, relation_manager, tag_manager, item_manager, report):
        """Tags not on the item, or not existing at all, are ignored."""
        other = item_manager.add("other.txt")
        relation_manager.attach(other.id, ["home"])
        relation_manager.attach(report.id, ["work"])

        assert relation_manager.detach(report.id, ["home", "missing"]) == ["work"]
        assert relation_manager.get_tags(other.id) == ["home"]

    def test_detach_all(self, relation_manager, report):
        relation_manager.attach(report.id, ["a", "b"])
        relation_manager.detach_all(report.id)
        assert relation_manager.get_tags(report.id) == []

    def test_detach_unknown_item_raises(self, relation_manager):
        with pytest.raises(NotFoundError):
            relation_manager.detach(999, ["work"])


class TestRelationManagerReplace:
    """Test replace()."""

    def test_replace_round_trip(self, relation_manager, report):
        """Reading back gives exactly the requested set."""
        relation_manager.attach(report.id, ["old", "keep"])
        result = relation_manager.replace(report.id, ["keep", "New", "new", "fresh"])
        assert result == ["fresh", "keep", "new"]
        assert relation_manager.get_tags(report.id) == ["fresh", "keep", "new"]

    def test_replace_cleans_dangling(self, relation_manager, tag_manager, report):
        relation_manager.attach(report.id, ["old"])
        relation_manager.replace(report.id, ["new"])
        assert tag_manager.exists("old") is False

    def test_replace_keeps_tags_used_elsewhere(self, relation_manager, tag_manager, item_manager, report):
        other = item_manager.add("other.txt")
        relation_manager.attach(other.id, ["shared"])
        relation_manager.attach(report.id, ["shared"])

        relation_manager.replace(report.id, [])

        assert relation_manager.get_tags(report.id) == []
        assert tag_manager.exists("shared") is True

    def test_replace_logs_cleanup(self, db_session, tag_manager, report):
        mock_logger = MagicMock(spec=SomewhereLogger)
        relations = RelationManager(db_session, mock_logger, tags=tag_manager)
        relations.attach(report.id, ["old"])
        relations.replace(report.id, ["new"])
        messages = [call[0][0] for call in mock_logger.log_debug.call_args_list]
        assert "Dangling tags removed" in messages


class TestRelationManagerBatchAttach:
    """Test batch_attach()."""

    def test_batch_attach_by_name_and_id(self, relation_manager, item_manager, tag_manager, db_session):
        a = item_manager.add("a.txt")
        b = item_manager.add("b.txt")
        relation_manager.attach(a.id, ["work"])

        inserted = relation_manager.batch_attach(
            {"a.txt": ["work", "urgent"], b.id: ["Work", "home"]}
        )

        assert inserted == 3
        assert relation_manager.get_tags(a.id) == ["urgent", "work"]
        assert relation_manager.get_tags(b.id) == ["home", "work"]
        assert tag_manager.count() == 3
        assert pair_count(db_session) == 4

    def test_batch_attach_nothing_new(self, relation_manager, item_manager):
        a = item_manager.add("a.txt")
        relation_manager.attach(a.id, ["work"])
        assert relation_manager.batch_attach({a.id: ["work"]}) == 0

    def test_batch_attach_unknown_item_raises(self, relation_manager, item_manager, tag_manager):
        item_manager.add("a.txt")
        with pytest.raises(NotFoundError) as exc_info:
            relation_manager.batch_attach({"a.txt": ["work"], "ghost.txt": ["work"]})
        assert "ghost.txt" in str(exc_info.value)

    def test_failed_batch_creates_no_tags(self, relation_manager, item_manager, db_session):
        item_manager.add("a.txt")
        before = db_session.scalar(select(func.count()).select_from(Tag))

        with pytest.raises(NotFoundError):
            relation_manager.batch_attach({"a.txt": ["fresh"], "ghost.txt": ["newer"]})

        assert db_session.scalar(select(func.count()).select_from(Tag)) == before
        assert pair_count(db_session) == 0

    def test_batch_attach_logs_operation(self, db_session, tag_manager, item_manager):
        mock_logger = MagicMock(spec=SomewhereLogger)
        relations = RelationManager(db_session, mock_logger, tags=tag_manager)
        item = item_manager.add("a.txt")

        relations.batch_attach({item.id: ["x"]})

        operations = [call[0][0] for call in mock_logger.log_operation.call_args_list]
        assert "batch_attach_tags_completed" in operations

    def test_batch_attach_empty(self, relation_manager):
        assert relation_manager.batch_attach({}) == 0
