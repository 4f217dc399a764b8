"""Unit tests for logging setup."""

import logging

import pytest

from bookshelf.core.logging_config import CONSOLE_HANDLER_NAME, LOG_FORMAT, setup_logging


def console_handlers(root: logging.Logger) -> list[logging.Handler]:
    return [h for h in root.handlers if h.get_name() == CONSOLE_HANDLER_NAME]


@pytest.fixture
def root_logger():
    """Remove the bookshelf console handler around a test.

    Other root handlers, such as pytest's capture handlers, stay attached.
    """
    root = logging.getLogger()
    saved_level = root.level
    for handler in console_handlers(root):
        root.removeHandler(handler)
    yield root
    for handler in console_handlers(root):
        root.removeHandler(handler)
    root.setLevel(saved_level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_adds_single_console_handler(self, root_logger):
        """Test repeated setup does not stack handlers."""
        setup_logging("DEBUG")
        handlers_after_first_call = list(root_logger.handlers)
        setup_logging("DEBUG")

        assert root_logger.handlers == handlers_after_first_call
        (handler,) = console_handlers(root_logger)
        assert isinstance(handler, logging.StreamHandler)
        assert handler.formatter._fmt == LOG_FORMAT
        assert root_logger.level == logging.DEBUG

    def test_added_alongside_foreign_handlers(self, root_logger):
        """Test handlers installed by other code do not block the console handler."""
        foreign = logging.NullHandler()
        root_logger.addHandler(foreign)
        try:
            setup_logging("INFO")
            assert len(console_handlers(root_logger)) == 1
            assert foreign in root_logger.handlers
        finally:
            root_logger.removeHandler(foreign)

    def test_updates_level_on_later_calls(self, root_logger):
        setup_logging("DEBUG")
        setup_logging("warning")
        assert root_logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty")
        assert root_logger.level == logging.INFO
