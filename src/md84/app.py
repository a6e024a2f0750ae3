"""Terminal Markdown editor application."""

from __future__ import annotations

import argparse
import logging
import sys

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container, Vertical, VerticalScroll
from textual.widgets import Static

from md84._files import load_document, normalize_path, save_document
from md84._log import setup_logging
from md84._modes import EditorMode
from md84._preview import render_markdown
from md84.config import EditorConfig, KeyMap, load_config
from md84.widget import MarkdownEditor

logger = logging.getLogger(__name__)

SEARCH_HINT = "Press Enter to search, Esc to cancel"


def key_label(key: str) -> str:
    """Return a display label for a Textual key name (``ctrl+h`` -> ``Ctrl+H``)."""
    if key == "escape":
        return "Esc"
    *modifiers, name = key.split("+")
    name = name.upper() if len(name) <= 3 else name.capitalize()
    return "+".join([m.capitalize() for m in modifiers] + [name])


def help_text(keys: KeyMap) -> str:
    quit_keys = "/".join(key_label(k) for k in reversed(keys.quit))
    entries = [
        (keys.help, "Show this help"),
        (keys.save, "Save and exit"),
        (keys.search, "Search text"),
        (keys.menu, "Toggle function key menu"),
        (keys.preview, "Toggle Markdown preview"),
    ]
    lines = ["md84 Keybindings:"]
    lines += [f"{key_label(k)}: {desc}" for k, desc in entries]
    lines.append(f"{quit_keys}: Quit without saving")
    entries = [
        (keys.header, "Insert header"),
        (keys.list_item, "Insert list item"),
        (keys.bold, "Insert bold markers"),
        (keys.italic, "Insert italic markers"),
        (keys.link, "Insert link template"),
        (keys.code, "Insert inline code"),
    ]
    lines += [f"{key_label(k)}: {desc}" for k, desc in entries]
    return "\n".join(lines)


def menu_text(keys: KeyMap) -> str:
    return (
        f"{key_label(keys.help)}:Help  {key_label(keys.save)}:Save  "
        f"{key_label(keys.search)}:Search  {key_label(keys.menu)}:Hide Menu  "
        f"{key_label(keys.preview)}:Preview  {key_label(keys.quit[-1])}:Quit"
    )


class MarkdownEditorApp(App):
    """TUI app that wraps the MarkdownEditor widget."""

    CSS_PATH = "app.tcss"
    TITLE = "md84"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        file_path: str,
        initial_content: str = "",
        config: EditorConfig | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.initial_content = initial_content
        self.editor_config = config or EditorConfig()
        self.menu_visible: bool = self.editor_config.menu_visible
        self.save_error: OSError | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="main"):
            yield Static(menu_text(self.editor_config.keys), id="menu", markup=False)
            yield Static(id="title", markup=False)
            yield MarkdownEditor(
                self.initial_content, config=self.editor_config, id="editor"
            )
            yield Static(SEARCH_HINT, id="hint", markup=False)
        with Container(id="overlay"):
            with VerticalScroll(id="modal"):
                yield Static(id="modal-body", markup=False)
        yield Static(id="error", markup=False)

    def on_mount(self) -> None:
        theme = self.editor_config.theme
        layout = self.editor_config.layout
        menu = self.query_one("#menu", Static)
        menu.styles.background = theme.menu_background
        menu.styles.color = theme.menu_foreground
        menu.display = self.menu_visible
        self.query_one("#title", Static).styles.color = theme.header_color
        modal = self.query_one("#modal", VerticalScroll)
        modal.styles.width = layout.modal_width
        modal.styles.height = layout.modal_height
        modal.styles.background = theme.modal_background
        modal.styles.border = ("solid", theme.modal_border)
        editor = self.query_one("#editor", MarkdownEditor)
        editor.styles.width = layout.editor_width
        self._resize_editor()
        self._set_title(EditorMode.NORMAL)
        editor.focus()

    # -- View helpers ------------------------------------------------------

    def _resize_editor(self) -> None:
        layout = self.editor_config.layout
        rows = layout.editor_height
        if not self.menu_visible:
            rows += layout.menu_rows
        # +2 for the status bar and the search line
        self.query_one("#editor", MarkdownEditor).styles.height = rows + 2

    def _set_title(self, mode: EditorMode) -> None:
        title = self.query_one("#title", Static)
        if mode is EditorMode.SEARCH:
            title.update(f"Search in {self.file_path}")
        else:
            title.update(f"Editing {self.file_path}")
        self.sub_title = self.file_path

    def _show_modal(self, body: Text | str) -> None:
        self.query_one("#modal-body", Static).update(body)
        self.query_one("#modal", VerticalScroll).scroll_home(animate=False)
        self.query_one("#overlay").add_class("visible")

    def _hide_modal(self) -> None:
        self.query_one("#overlay").remove_class("visible")

    def _show_error(self, exc: OSError) -> None:
        self.save_error = exc
        message = Text("Error", style=f"bold {self.editor_config.theme.header_color}")
        message.append(f"\n\n{exc}", style="")
        self.query_one("#main").display = False
        self._hide_modal()
        error = self.query_one("#error", Static)
        error.update(message)
        error.add_class("visible")

    # -- Event handlers ----------------------------------------------------

    def on_key(self, event: events.Key) -> None:
        # the editor is hidden behind the error view; keep quitting possible
        if self.save_error is not None and event.key in self.editor_config.keys.quit:
            self.exit()

    def on_markdown_editor_quit(self, event: MarkdownEditor.Quit) -> None:
        self.exit()

    def on_markdown_editor_save_requested(
        self, event: MarkdownEditor.SaveRequested
    ) -> None:
        try:
            save_document(self.file_path, event.content)
        except OSError as exc:
            logger.error("save failed for %s: %s", self.file_path, exc)
            self._show_error(exc)
            return
        self.exit()

    def on_markdown_editor_menu_toggle_requested(
        self, event: MarkdownEditor.MenuToggleRequested
    ) -> None:
        self.menu_visible = not self.menu_visible
        self.query_one("#menu", Static).display = self.menu_visible
        self._resize_editor()

    def on_markdown_editor_mode_changed(self, event: MarkdownEditor.ModeChanged) -> None:
        mode = event.mode
        hint = self.query_one("#hint", Static)
        hint.set_class(mode is EditorMode.SEARCH, "visible")
        self._set_title(mode)
        if mode is EditorMode.HELP:
            self._show_modal(help_text(self.editor_config.keys))
        elif mode is EditorMode.PREVIEW:
            layout = self.editor_config.layout
            self._show_modal(
                render_markdown(
                    event.content,
                    width=layout.modal_width - 6,
                    code_theme=self.editor_config.theme.code_theme,
                )
            )
        else:
            self._hide_modal()
        logger.debug("mode -> %s", mode.name)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="md84",
        description="Terminal Markdown editor",
    )
    parser.add_argument("file", help="Markdown file to edit (.md is appended if missing)")
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration file (default: ~/.md84.json)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="write log records to this file instead of the Textual console",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="log key routing and other debug detail",
    )
    args = parser.parse_args()

    setup_logging(args.log_file, debug=args.debug)
    config = load_config(args.config)
    file_path = normalize_path(args.file)
    logger.info("editing %s", file_path)

    app = MarkdownEditorApp(
        file_path=file_path,
        initial_content=load_document(file_path),
        config=config,
    )
    app.run()
    if app.return_code:
        print(f"md84: error: exited with status {app.return_code}", file=sys.stderr)
        sys.exit(app.return_code)


if __name__ == "__main__":
    main()
