"""Loading and saving the edited document."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")


def normalize_path(file_path: str) -> str:
    """Append ``.md`` unless *file_path* already has a Markdown suffix."""
    if file_path.lower().endswith(MARKDOWN_SUFFIXES):
        return file_path
    return file_path + ".md"


def load_document(file_path: str) -> str:
    """Return the file's text, or an empty string if it cannot be read."""
    path = Path(file_path)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        logger.debug("new file: %s", path)
        return ""
    except OSError as exc:
        logger.warning("cannot read %s, starting empty: %s", path, exc)
        return ""
    return data.decode("utf-8", errors="replace")


def save_document(file_path: str, content: str) -> None:
    """Write *content* to *file_path*, creating parent directories.

    Raises OSError when the directory or the file cannot be written.
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
    logger.info("saved %s (%d bytes)", path, len(content.encode("utf-8")))
