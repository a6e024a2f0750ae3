"""End-to-end tests for MarkdownEditorApp."""

import asyncio

from md84._modes import EditorMode
from md84.app import MarkdownEditorApp, help_text, key_label, menu_text
from md84.config import KeyMap
from md84.widget import MarkdownEditor

SIZE = (100, 40)


def _run(app, scenario):
    async def runner():
        async with app.run_test(size=SIZE) as pilot:
            await scenario(app, pilot)

    asyncio.run(runner())


class TestLabels:
    def test_key_label(self):
        assert key_label("f1") == "F1"
        assert key_label("f10") == "F10"
        assert key_label("escape") == "Esc"
        assert key_label("ctrl+h") == "Ctrl+H"

    def test_menu_text(self):
        assert menu_text(KeyMap()) == (
            "F1:Help  F2:Save  F3:Search  F4:Hide Menu  F5:Preview  F10:Quit"
        )

    def test_help_text(self):
        text = help_text(KeyMap())
        assert "F1: Show this help" in text
        assert "F10/Esc: Quit without saving" in text
        assert "Ctrl+K: Insert link template" in text


class TestOverlays:
    def test_help_opens_and_closes(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "text")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            overlay = app.query_one("#overlay")
            await pilot.press("f1")
            await pilot.pause()
            assert editor.mode is EditorMode.HELP
            assert overlay.has_class("visible")
            await pilot.press("a", "f1")
            await pilot.pause()
            assert editor.mode is EditorMode.NORMAL
            assert not overlay.has_class("visible")
            assert editor.get_content() == "text"

        _run(app, scenario)

    def test_preview_then_cancel(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "# Title\n\n*body*")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            await pilot.press("f5")
            await pilot.pause()
            assert editor.mode is EditorMode.PREVIEW
            assert app.query_one("#overlay").has_class("visible")
            await pilot.press("x", "escape")
            await pilot.pause()
            assert editor.mode is EditorMode.NORMAL
            assert not app.query_one("#overlay").has_class("visible")
            assert editor.get_content() == "# Title\n\n*body*"

        _run(app, scenario)


class TestSearchFlow:
    def test_search_relocates_cursor(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "hello world\nbye")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            await pilot.press("f3")
            await pilot.pause()
            assert app.query_one("#hint").has_class("visible")
            await pilot.press("w", "o", "r", "l", "d", "enter")
            await pilot.pause()
            assert editor.mode is EditorMode.NORMAL
            assert editor.cursor_offset == 6
            assert not app.query_one("#hint").has_class("visible")

        _run(app, scenario)


class TestMenuToggle:
    def test_hiding_menu_gives_rows_to_editor(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            assert editor.styles.height.value == 22
            await pilot.press("f4")
            await pilot.pause()
            assert not app.query_one("#menu").display
            assert editor.styles.height.value == 24
            await pilot.press("f4")
            await pilot.pause()
            assert app.query_one("#menu").display

        _run(app, scenario)


class TestSaveAndQuit:
    def test_creates_directories_and_writes(self, tmp_path):
        target = tmp_path / "a" / "b" / "doc.md"
        app = MarkdownEditorApp(str(target), "# Title\n\nbody ✓\n")
        exits = []
        original_exit = app.exit

        def recording_exit(*args, **kwargs):
            exits.append(target.exists())
            return original_exit(*args, **kwargs)

        app.exit = recording_exit

        async def scenario(app, pilot):
            await pilot.press("f2")

        _run(app, scenario)
        assert target.read_bytes() == "# Title\n\nbody ✓\n".encode("utf-8")
        # the first exit comes from the save, after the file is on disk
        assert exits[:1] == [True]

    def test_write_failure_shows_error_and_stays_open(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        app = MarkdownEditorApp(str(blocker / "doc.md"), "text")

        async def scenario(app, pilot):
            await pilot.press("f2")
            await pilot.pause()
            assert app.save_error is not None
            assert app.is_running
            assert not app.query_one("#main").display
            assert app.query_one("#error").has_class("visible")

        _run(app, scenario)
        assert not (blocker / "doc.md").exists()


class TestPointer:
    def test_click_moves_cursor(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "hello\nworld")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            # 1 column of padding + 4 columns of gutter
            await pilot.click("#editor", offset=(7, 1))
            await pilot.pause()
            assert (editor.cursor_row, editor.cursor_col) == (1, 2)

        _run(app, scenario)

    def test_click_ignored_outside_normal_mode(self, tmp_path):
        app = MarkdownEditorApp(str(tmp_path / "doc.md"), "hello\nworld")

        async def scenario(app, pilot):
            editor = app.query_one("#editor", MarkdownEditor)
            await pilot.press("f3")
            await pilot.pause()
            await pilot.click("#editor", offset=(7, 1))
            await pilot.pause()
            assert (editor.cursor_row, editor.cursor_col) == (0, 0)
            await pilot.press("escape")
            await pilot.pause()
            assert editor.mode is EditorMode.NORMAL
            await pilot.click("#editor", offset=(7, 1))
            await pilot.pause()
            assert (editor.cursor_row, editor.cursor_col) == (1, 2)

        _run(app, scenario)
