"""Offset <-> (line, column) translation for the editor buffer."""

from __future__ import annotations

import unicodedata


def split_lines(text: str) -> list[str]:
    """Split buffer text into lines; an empty buffer is a single empty line."""
    return text.split("\n") if text else [""]


def _clamp_row(lines: list[str], row: int) -> int:
    return max(0, min(row, len(lines) - 1))


def line_start_offset(lines: list[str], row: int) -> int:
    """Return the offset of the first character of line *row*.

    This is the line-start approximation: the column inside the line is
    never added.
    """
    row = _clamp_row(lines, row)
    offset = 0
    for i in range(row):
        offset += len(lines[i]) + 1  # +1 for newline
    return offset


def offset_from_cursor(lines: list[str], row: int, col: int) -> int:
    """Return the flat character offset of ``(row, col)``."""
    row, col = clamp_position(lines, row, col)
    return line_start_offset(lines, row) + col


def cursor_from_offset(lines: list[str], offset: int) -> tuple[int, int]:
    """Return the ``(row, col)`` owning *offset*, clamped into the buffer."""
    if offset <= 0:
        return 0, 0
    start = 0
    for row, line in enumerate(lines):
        if start + len(line) + 1 > offset:
            return row, max(0, min(offset - start, len(line)))
        start += len(line) + 1
    last = len(lines) - 1
    return last, len(lines[last])


def clamp_position(lines: list[str], row: int, col: int) -> tuple[int, int]:
    row = _clamp_row(lines, row)
    return row, max(0, min(col, len(lines[row])))


_width_cache: dict[str, int] = {}


def char_width(ch: str) -> int:
    """Return display width of a character (2 for fullwidth/wide)."""
    if ch < "\u0100":
        return 1
    w = _width_cache.get(ch)
    if w is None:
        w = 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1
        _width_cache[ch] = w
    return w


def column_at_display(line: str, x: int, start: int = 0) -> int:
    """Return the character column under display column *x*.

    Display columns are counted from character *start*; positions past the
    end of the line map to ``len(line)``.
    """
    if x <= 0:
        return min(start, len(line))
    w = 0
    for i in range(start, len(line)):
        w += char_width(line[i])
        if w > x:
            return i
    return len(line)
