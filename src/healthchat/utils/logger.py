"""Logging setup for healthchat entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whichever front end is running.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "healthchat-rich"


def configure_logging(level: str | None = None, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the ``healthchat`` logger.

    Args:
        level: Log level name; defaults to HEALTHCHAT_LOG_LEVEL or WARNING
        console: Optional Rich console to write to (stderr by default)

    Returns:
        The package logger
    """
    level_str = (level or os.getenv("HEALTHCHAT_LOG_LEVEL", "WARNING")).upper()
    numeric_level = getattr(logging, level_str, logging.WARNING)

    logger = logging.getLogger("healthchat")
    logger.setLevel(numeric_level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger
