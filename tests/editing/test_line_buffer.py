"""Tests for LineBuffer."""

import pytest

from rcsfmt.editing.line_buffer import Cursor, LineBuffer


class TestTextConversion:
    @pytest.mark.parametrize("text", [
        "",
        "a\n",
        "a\nb\n",
        "a\nb",
        "\n\n",
        "crlf\r\nline\r\n",
        "form\x0cfeed\n",
    ])
    def test_round_trip(self, text):
        assert LineBuffer.from_text(text).to_text() == text

    def test_splits_on_lf_only(self):
        buffer = LineBuffer.from_text("a\r\nb\x0cc\n")
        assert buffer.lines == ["a\r", "b\x0cc"]

    def test_trailing_newline_flag(self):
        assert LineBuffer.from_text("a\n").trailing_newline is True
        assert LineBuffer.from_text("a").trailing_newline is False


class TestInPlaceList:
    def test_wraps_without_copy(self):
        lines = ["a", "b"]
        buffer = LineBuffer(lines)
        buffer.insert_lines(1, ["X"])
        assert lines == ["a", "X", "b"]
        assert buffer.lines is lines


class TestInsertLines:
    def test_insert_middle(self):
        buffer = LineBuffer(["a", "b"])
        buffer.insert_lines(1, ["X", "Y"])
        assert buffer.lines == ["a", "X", "Y", "b"]

    def test_insert_out_of_bounds(self):
        buffer = LineBuffer(["a"])
        with pytest.raises(IndexError):
            buffer.insert_lines(3, ["X"])

    def test_insert_at_end_sets_trailing_newline(self):
        buffer = LineBuffer(["a"], trailing_newline=True)
        buffer.insert_lines(1, ["b"], final_newline=False)
        assert buffer.to_text() == "a\nb"

    def test_insert_above_cursor_moves_it_down(self):
        buffer = LineBuffer(["a", "b", "c"], cursor=Cursor(2, 1))
        buffer.insert_lines(0, ["X"])
        assert buffer.cursor == Cursor(3, 1)

    def test_insert_below_cursor_keeps_it(self):
        buffer = LineBuffer(["a", "b", "c"], cursor=Cursor(2, 1))
        buffer.insert_lines(2, ["X"])
        assert buffer.cursor == Cursor(2, 1)


class TestDeleteLines:
    def test_returns_removed(self):
        buffer = LineBuffer(["a", "b", "c", "d"])
        assert buffer.delete_lines(1, 2) == ["b", "c"]
        assert buffer.lines == ["a", "d"]

    def test_delete_out_of_bounds(self):
        buffer = LineBuffer(["a", "b"])
        with pytest.raises(IndexError):
            buffer.delete_lines(1, 2)

    def test_delete_tail_restores_trailing_newline(self):
        buffer = LineBuffer.from_text("a\nb")
        buffer.delete_lines(1, 1)
        assert buffer.to_text() == "a\n"

    def test_delete_above_cursor(self):
        buffer = LineBuffer(["a", "b", "c", "d"], cursor=Cursor(4, 2))
        buffer.delete_lines(0, 2)
        assert buffer.cursor == Cursor(2, 2)

    def test_delete_cursor_line(self):
        buffer = LineBuffer(["a", "b", "c", "d"], cursor=Cursor(3, 2))
        buffer.delete_lines(1, 2)
        assert buffer.cursor == Cursor(2, 0)
        assert buffer[buffer.cursor.line - 1] == "d"

    def test_cursor_clamped_when_buffer_empties(self):
        buffer = LineBuffer(["a", "b"], cursor=Cursor(2, 0))
        buffer.delete_lines(0, 2)
        assert buffer.cursor == Cursor(1, 0)
        assert len(buffer) == 0


class TestSnapshot:
    def test_restore_puts_back_content_and_cursor(self):
        lines = ["a", "b", "c"]
        buffer = LineBuffer(lines, trailing_newline=False, cursor=Cursor(3, 1))
        snap = buffer.snapshot()

        buffer.delete_lines(0, 2)
        buffer.insert_lines(1, ["z"])
        buffer.restore(snap)

        assert lines == ["a", "b", "c"]
        assert buffer.trailing_newline is False
        assert buffer.cursor == Cursor(3, 1)
