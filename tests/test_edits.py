"""Tests for the structured Markdown edits."""

from md84._edits import header_level
from md84.widget import MarkdownEditor


class TestInsertText:
    def test_insert_single_line(self):
        editor = MarkdownEditor("ab")
        editor.move_to(0, 1)
        editor.insert_text("xy")
        assert editor.lines == ["axyb"]
        assert (editor.cursor_row, editor.cursor_col) == (0, 3)

    def test_insert_with_newline(self):
        editor = MarkdownEditor("ab")
        editor.move_to(0, 1)
        editor.insert_text("x\ny")
        assert editor.lines == ["ax", "yb"]
        assert (editor.cursor_row, editor.cursor_col) == (1, 1)

    def test_move_cursor_by_crosses_lines(self):
        editor = MarkdownEditor("ab\ncd")
        editor.move_to(1, 0)
        editor.move_cursor_by(-1)
        assert (editor.cursor_row, editor.cursor_col) == (0, 2)


class TestHeaderToggle:
    def test_header_level(self):
        assert header_level("### x") == 3
        assert header_level("x # y") == 0
        assert header_level("# C# notes") == 2

    def test_stops_at_six_with_cursor_at_line_end(self):
        editor = MarkdownEditor("# Title")
        editor.move_to(0, 7)
        for _ in range(5):
            editor.toggle_header()
        assert editor.lines == ["# Title#####"]
        assert editor.lines[0].count("#") == 6
        editor.toggle_header()
        assert editor.lines == ["# Title#####"]
        assert "maximum" in editor.status_msg

    def test_plain_line_gets_level_one(self):
        editor = MarkdownEditor("Title")
        editor.toggle_header()
        assert editor.lines == ["# Title"]
        assert editor.cursor_col == 2

    def test_empty_buffer(self):
        editor = MarkdownEditor()
        editor.toggle_header()
        assert editor.lines == ["# "]

    def test_hash_inside_line_is_not_a_header(self):
        editor = MarkdownEditor("a #b")
        editor.toggle_header()
        assert editor.lines == ["# a #b"]

    def test_increments_level(self):
        editor = MarkdownEditor("# Title")
        editor.toggle_header()
        assert editor.lines == ["## Title"]

    def test_stops_at_six(self):
        editor = MarkdownEditor("# Title")
        editor.toggle_header()
        for _ in range(5):
            editor.toggle_header()
        assert editor.lines == ["###### Title"]
        editor.toggle_header()
        assert editor.lines == ["###### Title"]
        assert "maximum" in editor.status_msg

    def test_uses_current_line(self):
        editor = MarkdownEditor("# one\ntwo")
        editor.move_to(1, 0)
        editor.toggle_header()
        assert editor.lines == ["# one", "# two"]


class TestMarkers:
    def test_list_item(self):
        editor = MarkdownEditor("item")
        editor.insert_list_item()
        assert editor.lines == ["- item"]
        assert editor.cursor_col == 2

    def test_bold_at_every_offset(self):
        for k in range(3):
            editor = MarkdownEditor("ab")
            editor.move_to_offset(k)
            editor.insert_bold()
            assert editor.get_content() == "ab"[:k] + "****" + "ab"[k:]
            assert editor.cursor_offset == k + 2

    def test_italic(self):
        editor = MarkdownEditor("ab")
        editor.move_to_offset(1)
        editor.insert_italic()
        assert editor.get_content() == "a**b"
        assert editor.cursor_offset == 2

    def test_link_cursor_inside_text_placeholder(self):
        editor = MarkdownEditor("see ")
        editor.move_to_offset(4)
        editor.insert_link()
        assert editor.get_content() == "see [text](url)"
        assert editor.cursor_offset == 5
        assert editor.lines[0][editor.cursor_col] == "t"

    def test_inline_code(self):
        editor = MarkdownEditor("")
        editor.insert_code()
        assert editor.get_content() == "``"
        assert editor.cursor_col == 1

    def test_bold_on_later_line(self):
        editor = MarkdownEditor("first\nsecond")
        editor.move_to(1, 6)
        editor.insert_bold()
        assert editor.lines == ["first", "second****"]
        assert (editor.cursor_row, editor.cursor_col) == (1, 8)
