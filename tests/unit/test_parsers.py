"""
test_parsers.py
---------------
Unit tests for somewhere.utils.parsers module.

Covers command line splitting and the TiddlyWiki field parsers used by
the JSON import.
"""
import pytest
from datetime import datetime

from somewhere.core.exceptions import ValidationError
from somewhere.utils.parsers import (
    break_arguments,
    join_tags,
    parse_tiddler_created,
    parse_tiddler_tags,
)


class TestBreakArguments:
    """Test break_arguments function."""

    def test_splits_on_spaces(self):
        assert break_arguments("tag report.txt work") == ["tag", "report.txt", "work"]

    def test_collapses_repeated_spaces(self):
        assert break_arguments("files   note ") == ["files", "note"]

    def test_quotes_keep_spaces(self):
        """Test quoted text is one argument."""
        assert break_arguments('tag "my file.txt" "work, urgent"') == [
            "tag",
            "my file.txt",
            "work, urgent",
        ]

    def test_empty_quotes_give_empty_argument(self):
        """Test "" yields an empty argument (used for knowledge items)."""
        assert break_arguments('create "" "some text" "a, b"') == [
            "create",
            "",
            "some text",
            "a, b",
        ]

    def test_doubled_quote_is_literal(self):
        assert break_arguments('mv "say ""hi"".txt" b.txt') == [
            "mv",
            'say "hi".txt',
            "b.txt",
        ]

    def test_empty_line(self):
        assert break_arguments("") == []
        assert break_arguments("   ") == []


class TestParseTiddlerTags:
    """Test parse_tiddler_tags function."""

    def test_space_separated(self):
        assert parse_tiddler_tags("journal idea") == ["journal", "idea"]

    def test_bracketed_tags_keep_spaces(self):
        """Test [[two words]] is a single tag."""
        assert parse_tiddler_tags("journal [[to read]] idea") == [
            "journal",
            "to read",
            "idea",
        ]

    def test_quotes_replaced(self):
        assert parse_tiddler_tags('say"hi') == ["say_hi"]

    def test_empty(self):
        assert parse_tiddler_tags(None) == []
        assert parse_tiddler_tags("") == []


class TestParseTiddlerCreated:
    """Test parse_tiddler_created function."""

    def test_parses_milliseconds(self):
        """Test the trailing three digits are read as milliseconds."""
        parsed = parse_tiddler_created("20200315093000123")
        assert parsed == datetime(2020, 3, 15, 9, 30, 0, 123000)

    @pytest.mark.parametrize(
        "value",
        ["2020", "2020031509300012x", "", "20201315093000123", "20200230093000123", "20200315253000123"],
    )
    def test_invalid_raises(self, value):
        with pytest.raises(ValidationError):
            parse_tiddler_created(value)


class TestJoinTags:
    """Test join_tags function."""

    def test_joins_with_comma_space(self):
        assert join_tags(["a", "b"]) == "a, b"

    def test_empty(self):
        assert join_tags([]) == ""
