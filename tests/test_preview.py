"""Tests for Markdown preview rendering."""

from rich.text import Text

import md84._preview as preview
from md84._preview import render_markdown


class TestRenderMarkdown:
    def test_renders_heading_and_text(self):
        result = render_markdown("# Title\n\nsome *emphasis* here")
        assert isinstance(result, Text)
        assert "Title" in result.plain
        assert "emphasis" in result.plain
        assert "*emphasis*" not in result.plain

    def test_list_bullets(self):
        result = render_markdown("- one\n- two")
        assert "one" in result.plain
        assert "- one" not in result.plain

    def test_failure_falls_back_to_raw(self, monkeypatch):
        def broken(*args, **kwargs):
            raise ValueError("boom")

        monkeypatch.setattr(preview, "Markdown", broken)
        result = render_markdown("# raw *text*")
        assert result.plain == "# raw *text*"
