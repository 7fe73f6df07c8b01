"""
Unit tests for the in-memory BufferEditor.
"""

import pytest

from cmdserver.core.buffer_editor import BufferEditor
from cmdserver.core.editor import Position


@pytest.fixture
def editor():
    return BufferEditor("ab\ncde\n\nf")


class TestOffsets:
    def test_pos_to_offset(self, editor):
        assert editor.pos_to_offset(Position(0, 0)) == 0
        assert editor.pos_to_offset(Position(1, 1)) == 4
        assert editor.pos_to_offset(Position(3, 1)) == 9

    def test_offset_to_pos(self, editor):
        assert editor.offset_to_pos(2) == Position(0, 2)
        assert editor.offset_to_pos(3) == Position(1, 0)
        assert editor.offset_to_pos(7) == Position(2, 0)
        assert editor.offset_to_pos(1000) == Position(3, 1)

    def test_clipping(self, editor):
        assert editor.clip_pos(Position(-1, 5)) == Position(0, 2)
        assert editor.clip_pos(Position(10, 10)) == Position(3, 1)


class TestDocument:
    def test_lines(self, editor):
        assert editor.line_count() == 4
        assert editor.get_line(2) == ""
        assert editor.last_line_end() == Position(3, 1)

    def test_get_line_out_of_range(self, editor):
        with pytest.raises(IndexError):
            editor.get_line(4)

    def test_replace_range_marks_dirty(self, editor):
        assert not editor.dirty
        editor.replace_range("XY", Position(1, 0), Position(1, 3))
        assert editor.get_value() == "ab\nXY\n\nf"
        assert editor.dirty

    def test_empty_document(self):
        editor = BufferEditor("")
        assert editor.line_count() == 1
        assert editor.last_line_end() == Position(0, 0)


class TestSelection:
    def test_from_to_ordering(self, editor):
        editor.set_selection(Position(1, 2), Position(0, 1))
        assert editor.get_cursor("from") == Position(0, 1)
        assert editor.get_cursor("to") == Position(1, 2)
        assert editor.get_cursor("head") == Position(0, 1)
        assert editor.get_selection() == "b\ncd"

    def test_replace_selection_moves_cursor(self, editor):
        editor.set_selection(Position(0, 0), Position(0, 2))
        editor.replace_selection("hello")
        assert editor.get_value().startswith("hello\n")
        assert editor.get_cursor() == Position(0, 5)

    def test_word_at(self, editor):
        assert editor.word_at(Position(1, 3)) == (Position(1, 0), Position(1, 3))
        assert editor.word_at(Position(2, 0)) is None

    def test_unknown_cursor_kind(self, editor):
        with pytest.raises(ValueError):
            editor.get_cursor("middle")
