"""Markdown preview rendering through Rich."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

logger = logging.getLogger(__name__)


def render_markdown(source: str, *, width: int = 58, code_theme: str = "monokai") -> Text:
    """Render *source* as terminal text.

    Any failure inside the renderer falls back to the raw source.
    """
    console = Console(
        width=max(10, width),
        force_terminal=True,
        color_system="truecolor",
        legacy_windows=False,
    )
    try:
        with console.capture() as capture:
            console.print(Markdown(source, code_theme=code_theme))
        return Text.from_ansi(capture.get().rstrip("\n"))
    except Exception:
        logger.exception("markdown rendering failed; showing raw text")
        return Text(source)
