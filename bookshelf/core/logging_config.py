"""Logging configuration."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_HANDLER_NAME = "bookshelf-console"


def setup_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger.

    The console handler is added only once; later calls just adjust the level.
    This keeps repeated ``create_app`` calls in tests from stacking handlers.
    Handlers installed by other code (uvicorn, pytest) are left alone.

    Args:
        level: Logging level name, case insensitive. Unknown names fall back to INFO.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
