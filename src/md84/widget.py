"""Markdown editor widget."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from md84._cursor import (
    char_width,
    clamp_position,
    column_at_display,
    cursor_from_offset,
    offset_from_cursor,
    split_lines,
)
from md84._edits import EditMixin
from md84._modes import Action, EditorMode, ModeMachine, Transition
from md84._search import QueryInput, SearchMixin
from md84.config import EditorConfig

logger = logging.getLogger(__name__)


class MarkdownEditor(EditMixin, SearchMixin, Widget, can_focus=True):
    """A Textual widget editing Markdown text.

    Ordinary keys edit the buffer directly; the shortcuts of the configured
    KeyMap insert Markdown markup, open the help / preview overlays, search,
    toggle the menu, save or quit.  Overlays and saving are carried out by the
    app in response to the messages below.
    """

    DEFAULT_CSS = """
    MarkdownEditor {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    # -- Messages ----------------------------------------------------------

    @dataclass
    class Quit(Message):
        pass

    @dataclass
    class SaveRequested(Message):
        content: str

    @dataclass
    class MenuToggleRequested(Message):
        pass

    @dataclass
    class ModeChanged(Message):
        mode: EditorMode
        content: str = ""  # buffer snapshot, set when entering PREVIEW

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        initial_content: str = "",
        *,
        config: EditorConfig | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.config: EditorConfig = config or EditorConfig()
        self.lines: list[str] = split_lines(initial_content)
        self.cursor_row: int = 0
        self.cursor_col: int = 0
        self.status_msg: str = ""
        self.machine = ModeMachine(self.config.keys)
        self._query = QueryInput(self.config.search_char_limit)
        self._scroll_top: int = 0
        self._text_width: int = self.config.layout.editor_width
        self._style_cache: dict[str, list[str]] = {}

    @property
    def mode(self) -> EditorMode:
        return self.machine.mode

    @property
    def search_query(self) -> str:
        """Current text of the search field."""
        return self._query.value

    # -- Cursor positioning ------------------------------------------------

    @property
    def cursor_offset(self) -> int:
        return offset_from_cursor(self.lines, self.cursor_row, self.cursor_col)

    def move_to(self, row: int, col: int) -> None:
        self.cursor_row, self.cursor_col = clamp_position(self.lines, row, col)

    def move_to_offset(self, offset: int) -> None:
        self.cursor_row, self.cursor_col = cursor_from_offset(self.lines, offset)

    def move_cursor_by(self, delta: int) -> None:
        """Move the cursor *delta* characters through the flat offset."""
        self.move_to_offset(self.cursor_offset + delta)

    def _clamp_cursor(self) -> None:
        self.move_to(self.cursor_row, self.cursor_col)

    # -- Public API --------------------------------------------------------

    def get_content(self) -> str:
        return "\n".join(self.lines)

    def set_content(self, content: str) -> None:
        self.lines = split_lines(content)
        self.cursor_row = 0
        self.cursor_col = 0
        self._scroll_top = 0
        self.refresh()

    # -- Layout helpers ----------------------------------------------------

    def _make_segments(self, line: str, avail: int) -> list[tuple[int, int]]:
        """Break *line* into segments fitting within *avail* display columns."""
        if not line:
            return [(0, 0)]
        if line.isascii():
            return [(s, min(s + avail, len(line))) for s in range(0, len(line), avail)]
        segs: list[tuple[int, int]] = []
        seg_start = 0
        w = 0
        for i, ch in enumerate(line):
            cw = char_width(ch)
            if w + cw > avail and i > seg_start:
                segs.append((seg_start, i))
                seg_start = i
                w = cw
            else:
                w += cw
        segs.append((seg_start, len(line)))
        return segs

    def _cursor_wrap_dy(self, line: str, cursor_col: int, avail: int) -> int:
        """Return the wrapped row index (0-based) of *cursor_col* within *line*."""
        segs = self._make_segments(line, avail)
        for si, (_s_start, s_end) in enumerate(segs):
            if cursor_col < s_end:
                return si
        # cursor at end of line: the cursor block may need its own row
        if line:
            ls, le = segs[-1]
            last_w = sum(char_width(line[c]) for c in range(ls, le))
            if last_w + 1 > avail:
                return len(segs)
        return max(0, len(segs) - 1)

    def _gutter_width(self) -> int:
        return max(3, len(str(len(self.lines)))) + 1

    def _visible_height(self) -> int:
        return max(1, self.content_region.height - 2)

    def _ensure_cursor_visible(self, avail: int) -> None:
        vh = self._visible_height()
        if self.cursor_row < self._scroll_top:
            self._scroll_top = self.cursor_row
        lines = self.lines
        rows_before = sum(
            len(self._make_segments(lines[i], avail))
            for i in range(self._scroll_top, self.cursor_row)
        )
        cursor_dy = self._cursor_wrap_dy(lines[self.cursor_row], self.cursor_col, avail)
        while rows_before + cursor_dy >= vh and self._scroll_top < self.cursor_row:
            rows_before -= len(self._make_segments(lines[self._scroll_top], avail))
            self._scroll_top += 1

    def position_at(self, x: int, y: int) -> tuple[int, int]:
        """Map a content-relative cell to the buffer ``(row, col)`` under it.

        Cells past the last line or past the end of a line clamp to the
        nearest valid position.
        """
        avail = self._text_width
        text_x = x - self._gutter_width()
        rows = 0
        for row in range(self._scroll_top, len(self.lines)):
            line = self.lines[row]
            segs = self._make_segments(line, avail)
            if y < rows + len(segs):
                si = max(0, y - rows)
                s_start, s_end = segs[si]
                col = column_at_display(line[:s_end], text_x, s_start)
                if si < len(segs) - 1:
                    # s_end belongs to the next wrapped row
                    col = min(col, s_end - 1)
                return clamp_position(self.lines, row, col)
            rows += len(segs)
        last = len(self.lines) - 1
        s_start, _s_end = self._make_segments(self.lines[last], avail)[-1]
        col = column_at_display(self.lines[last], text_x, s_start)
        return clamp_position(self.lines, last, col)

    # =====================================================================
    # Rendering
    # =====================================================================

    _LIST_RE = re.compile(r"^(\s*)([-*+]|\d+[.)])(\s)")
    _INLINE_RE = re.compile(
        r"(?P<code>`[^`]*`)"
        r"|(?P<bold>\*\*[^*]+\*\*|__[^_]+__)"
        r"|(?P<italic>\*[^*\s][^*]*\*|_[^_\s][^_]*_)"
        r"|(?P<link>\[[^\]]*\]\([^)]*\))"
    )
    _INLINE_STYLE = {
        "code": "bold magenta",
        "bold": "bold",
        "italic": "italic",
        "link": "underline cyan",
    }
    _MODE_STYLE = {
        EditorMode.NORMAL: "bold white on dark_green",
        EditorMode.PREVIEW: "bold white on dark_blue",
        EditorMode.HELP: "bold white on dark_cyan",
        EditorMode.SEARCH: "bold white on dark_magenta",
    }

    def _compute_line_styles(self, line: str) -> list[str]:
        """Compute Markdown highlight styles for every character in *line*."""
        cached = self._style_cache.get(line)
        if cached is not None:
            return cached
        n = len(line)
        if line.startswith("#"):
            styles = [f"bold {self.config.theme.header_color}"] * n
        elif line.lstrip().startswith("```"):
            styles = ["dim"] * n
        elif line.startswith(">"):
            styles = ["italic green"] * n
        else:
            styles = [""] * n
            m = self._LIST_RE.match(line)
            if m:
                for c in range(m.start(2), m.end(2)):
                    styles[c] = "bold yellow"
            for m in self._INLINE_RE.finditer(line):
                style = self._INLINE_STYLE[m.lastgroup]
                for c in range(m.start(), m.end()):
                    styles[c] = style
        if len(self._style_cache) > 4096:
            self._style_cache.clear()
        self._style_cache[line] = styles
        return styles

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 3 or width < 10:
            return Text("(too small)")

        content_height = height - 2
        prefix_w = self._gutter_width()
        ln_width = prefix_w - 1
        avail = max(1, width - prefix_w)
        self._text_width = avail

        self._ensure_cursor_visible(avail)

        lines = self.lines
        cursor_row = self.cursor_row
        cursor_col = self.cursor_col
        show_cursor = self.mode is not EditorMode.SEARCH
        make_segments = self._make_segments
        compute_styles = self._compute_line_styles
        result_append = Text.append

        result = Text()
        rows_used = 0
        line_idx = self._scroll_top
        num_lines = len(lines)
        gutter_pad = " " * prefix_w
        empty = num_lines == 1 and not lines[0]

        while rows_used < content_height and line_idx < num_lines:
            line = lines[line_idx]
            is_cursor_line = show_cursor and line_idx == cursor_row
            line_styles = compute_styles(line)
            line_len = len(line)

            segs = make_segments(line, avail)
            if is_cursor_line and cursor_col >= line_len and line:
                ls, le = segs[-1]
                last_w = sum(char_width(line[c]) for c in range(ls, le))
                if last_w + 1 > avail:
                    segs.append((line_len, line_len))

            for si, (s_start, s_end) in enumerate(segs):
                if rows_used >= content_height:
                    break
                if si == 0 or rows_used == 0:
                    result_append(
                        result, f"{line_idx + 1:>{ln_width}} ", style="dim cyan"
                    )
                else:
                    result_append(result, gutter_pad)
                # batch consecutive chars with the same style
                col = s_start
                while col < s_end:
                    if is_cursor_line and col == cursor_col:
                        result_append(
                            result, line[col], style=f"reverse {line_styles[col]}"
                        )
                        col += 1
                        continue
                    sty = line_styles[col]
                    end = col + 1
                    while (
                        end < s_end
                        and line_styles[end] == sty
                        and not (is_cursor_line and end == cursor_col)
                    ):
                        end += 1
                    result_append(result, line[col:end], style=sty)
                    col = end
                if is_cursor_line and cursor_col >= line_len and si == len(segs) - 1:
                    result_append(result, " ", style="reverse")
                if empty:
                    result_append(
                        result, self.config.placeholder[: avail - 1], style="dim italic"
                    )
                result_append(result, "\n")
                rows_used += 1

            line_idx += 1

        if rows_used < content_height:
            tilde_line = f"{'~':>{prefix_w - 1}} \n"
            while rows_used < content_height:
                result_append(result, tilde_line, style="dim blue")
                rows_used += 1

        # status bar
        mode = self.mode
        mode_label = f" {mode.name} "
        result_append(result, mode_label, style=self._MODE_STYLE[mode])
        status_msg = self.status_msg
        pos = f" Ln {cursor_row + 1}/{num_lines}, Col {cursor_col + 1} "
        spacer_len = max(0, width - len(mode_label) - len(pos) - len(status_msg) - 2)
        result_append(result, f"  {status_msg}")
        if spacer_len:
            result_append(result, " " * spacer_len)
        result_append(result, pos, style="bold")

        if mode == EditorMode.SEARCH:
            self._render_query(result)
        else:
            result_append(result, "\n")

        return result

    def _render_query(self, result: Text) -> None:
        query = self._query
        result.append("\nSearch: ", style="bold magenta")
        start, end = query.window(self.config.layout.query_width)
        value = query.value[start:end]
        cursor = query.cursor - start
        result.append(value[:cursor], style="bold")
        if cursor < len(value):
            result.append(value[cursor], style="reverse bold")
            result.append(value[cursor + 1 :], style="bold")
        else:
            result.append(" ", style="reverse")
            if not query.value:
                result.append(query.placeholder, style="dim italic")

    # =====================================================================
    # Input handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.route_key(event)
        self._clamp_cursor()
        self.refresh()

    def route_key(self, event) -> Transition:
        """Route one key through the mode machine and apply its action."""
        transition = self.machine.feed(event.key)
        self._apply(transition, event)
        return transition

    def _apply(self, transition: Transition, event) -> None:
        action = transition.action
        if action is Action.PASSTHROUGH:
            self._handle_typing(event)
        elif action is Action.QUERY_INPUT:
            self._handle_search(event)
        elif action is Action.NONE:
            return
        elif action is Action.QUIT:
            self.post_message(self.Quit())
        elif action is Action.SAVE_AND_QUIT:
            self.post_message(self.SaveRequested(content=self.get_content()))
        elif action is Action.TOGGLE_MENU:
            self.post_message(self.MenuToggleRequested())
        elif action is Action.OPEN_PREVIEW:
            self.post_message(
                self.ModeChanged(transition.mode, content=self.get_content())
            )
        elif action in (Action.OPEN_HELP, Action.CLOSE_HELP, Action.CLOSE_PREVIEW):
            self.post_message(self.ModeChanged(transition.mode))
        elif action is Action.OPEN_SEARCH:
            self._query.reset()
            self.status_msg = ""
            self.post_message(self.ModeChanged(transition.mode))
        elif action is Action.CANCEL_SEARCH:
            self._query.reset()
            self.post_message(self.ModeChanged(transition.mode))
        elif action is Action.COMMIT_SEARCH:
            self.search(self._query.value)
            self._query.reset()
            self.post_message(self.ModeChanged(transition.mode))
        elif action is Action.HEADER:
            self.toggle_header()
        elif action is Action.LIST_ITEM:
            self.insert_list_item()
        elif action is Action.BOLD:
            self.insert_bold()
        elif action is Action.ITALIC:
            self.insert_italic()
        elif action is Action.LINK:
            self.insert_link()
        elif action is Action.CODE:
            self.insert_code()
        logger.debug("key %r -> %s (%s)", event.key, action.name, transition.mode.name)

    def _handle_typing(self, event) -> None:
        key = event.key
        char = event.character

        if key == "backspace":
            if self.cursor_col > 0:
                line = self.lines[self.cursor_row]
                self.lines[self.cursor_row] = (
                    line[: self.cursor_col - 1] + line[self.cursor_col :]
                )
                self.cursor_col -= 1
            elif self.cursor_row > 0:
                prev = self.lines[self.cursor_row - 1]
                self.cursor_col = len(prev)
                self.lines[self.cursor_row - 1] = prev + self.lines[self.cursor_row]
                self.lines.pop(self.cursor_row)
                self.cursor_row -= 1
            return

        if key == "delete":
            line = self.lines[self.cursor_row]
            if self.cursor_col < len(line):
                self.lines[self.cursor_row] = (
                    line[: self.cursor_col] + line[self.cursor_col + 1 :]
                )
            elif self.cursor_row < len(self.lines) - 1:
                self.lines[self.cursor_row] = line + self.lines.pop(self.cursor_row + 1)
            return

        if key == "enter":
            self.insert_text("\n")
            return

        if key == "tab":
            self.insert_text("    ")
            return

        if key == "end":
            self.cursor_col = len(self.lines[self.cursor_row])
            return
        if key == "home":
            self.cursor_col = 0
            return
        if key in ("pageup", "pagedown"):
            step = self._visible_height()
            self.cursor_row += step if key == "pagedown" else -step
            return

        if key in ("left", "right"):
            self.move_cursor_by(-1 if key == "left" else 1)
            return
        if key in ("up", "down"):
            self.cursor_row += -1 if key == "up" else 1
            return

        if char and char.isprintable():
            self.insert_text(char)

    def on_click(self, event: events.Click) -> None:
        if not self.machine.accepts_pointer() or event.button != 1:
            return
        offset = event.get_content_offset(self)
        if offset is None:
            return
        self.move_to(*self.position_at(offset.x, offset.y))
        self.refresh()
