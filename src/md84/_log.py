"""Logging setup for the editor.

The TUI owns the terminal, so records go either to a rotating log file or to
the Textual devtools console, never to stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from textual.logging import TextualHandler

logger = logging.getLogger("md84")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(log_file: str | None = None, debug: bool = False) -> logging.Handler:
    """Attach a single handler to the ``md84`` logger and return it.

    Calling it again replaces the previous handler.
    """
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = TextualHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    return handler
