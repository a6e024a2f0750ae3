"""Search mixin and query field for MarkdownEditor."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def find_first(text: str, query: str) -> int:
    """Return the offset of the first case-insensitive match of *query*.

    Always scans from the start of *text*.  Returns -1 for an empty query or
    when nothing matches.
    """
    if not query:
        return -1
    return text.lower().find(query.lower())


class QueryInput:
    """Single-line text field holding the search query."""

    def __init__(
        self, char_limit: int = 80, placeholder: str = "Enter search term..."
    ) -> None:
        self.char_limit = char_limit
        self.placeholder = placeholder
        self.value: str = ""
        self.cursor: int = 0

    def reset(self) -> None:
        self.value = ""
        self.cursor = 0

    def window(self, width: int) -> tuple[int, int]:
        """Return the ``(start, end)`` slice of the value shown in *width* cells.

        The window scrolls so the cursor cell is always inside it.
        """
        if width <= 0:
            return 0, len(self.value)
        start = max(0, self.cursor - width + 1)
        return start, start + width

    def handle_key(self, key: str, char: str | None) -> None:
        if key == "backspace":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
                self.cursor -= 1
            return
        if key == "delete":
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
            return
        if key == "left":
            self.cursor = max(0, self.cursor - 1)
            return
        if key == "right":
            self.cursor = min(len(self.value), self.cursor + 1)
            return
        if key == "home":
            self.cursor = 0
            return
        if key == "end":
            self.cursor = len(self.value)
            return

        if char and char.isprintable():
            if self.char_limit and len(self.value) >= self.char_limit:
                return
            self.value = self.value[: self.cursor] + char + self.value[self.cursor :]
            self.cursor += 1


class SearchMixin:
    """Search-related methods for MarkdownEditor."""

    def search(self, query: str) -> bool:
        """Move the cursor to the first match of *query*.

        Returns True when the cursor was relocated.  A miss leaves the
        cursor where it was.
        """
        if not query:
            return False
        idx = find_first(self.get_content(), query)
        if idx < 0:
            logger.debug("search miss: %r", query)
            self.status_msg = f"Pattern not found: {query}"
            return False
        self.move_to_offset(idx)
        self.status_msg = ""
        return True

    def _handle_search(self, event) -> None:
        """Route a key to the query field while searching."""
        self._query.handle_key(event.key, event.character)
