"""Structured Markdown edits for MarkdownEditor."""

from __future__ import annotations

MAX_HEADER_LEVEL = 6

LIST_MARKER = "- "
BOLD_MARKER = "****"
ITALIC_MARKER = "**"
LINK_TEMPLATE = "[text](url)"
CODE_MARKER = "``"


def header_level(line: str) -> int:
    """Return the header level of *line*: every ``#`` on a header line counts."""
    if not line.startswith("#"):
        return 0
    return line.count("#")


class EditMixin:
    """Insertion primitive and the shortcut-bound Markdown edits."""

    def insert_text(self, text: str) -> None:
        """Insert *text* at the cursor and leave the cursor after it."""
        line = self.lines[self.cursor_row]
        before = line[: self.cursor_col]
        after = line[self.cursor_col :]
        parts = text.split("\n")
        if len(parts) == 1:
            self.lines[self.cursor_row] = before + text + after
            self.cursor_col += len(text)
            return
        new_lines = [before + parts[0], *parts[1:-1], parts[-1] + after]
        self.lines[self.cursor_row : self.cursor_row + 1] = new_lines
        self.cursor_row += len(parts) - 1
        self.cursor_col = len(parts[-1])

    def _insert_and_back(self, marker: str, back: int) -> None:
        self.insert_text(marker)
        self.move_cursor_by(-back)

    def toggle_header(self) -> None:
        """Add a header level, or start a level-1 header on a plain line."""
        line = self.lines[self.cursor_row]
        if not line.startswith("#"):
            self.insert_text("# ")
            return
        if header_level(line) >= MAX_HEADER_LEVEL:
            self.status_msg = f"header level {MAX_HEADER_LEVEL} is the maximum"
            return
        self.insert_text("#")

    def insert_list_item(self) -> None:
        self.insert_text(LIST_MARKER)

    def insert_bold(self) -> None:
        self._insert_and_back(BOLD_MARKER, 2)

    def insert_italic(self) -> None:
        self._insert_and_back(ITALIC_MARKER, 1)

    def insert_link(self) -> None:
        """Insert a link template with the cursor just after ``[``."""
        self._insert_and_back(LINK_TEMPLATE, len(LINK_TEMPLATE) - 1)

    def insert_code(self) -> None:
        self._insert_and_back(CODE_MARKER, 1)
