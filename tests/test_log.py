"""Tests for logging setup."""

import logging
import logging.handlers

from textual.logging import TextualHandler

from md84._log import logger, setup_logging


class TestSetupLogging:
    def teardown_method(self):
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_file_handler(self, tmp_path):
        path = tmp_path / "logs" / "md84.log"
        handler = setup_logging(str(path))
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        logging.getLogger("md84.widget").info("hello")
        handler.flush()
        assert "hello" in path.read_text(encoding="utf-8")

    def test_textual_handler_without_file(self):
        handler = setup_logging()
        assert isinstance(handler, TextualHandler)

    def test_repeated_setup_replaces_handler(self, tmp_path):
        setup_logging(str(tmp_path / "a.log"))
        setup_logging(str(tmp_path / "b.log"), debug=True)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
