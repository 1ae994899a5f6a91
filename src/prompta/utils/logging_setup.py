"""Logging setup for the command-line application."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: int = logging.WARNING) -> logging.Handler:
    """Route log records to stderr through rich.

    Replaces any handler installed by an earlier call so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        level: Root logger level

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_prompta_handler", False):
            root.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=level <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._prompta_handler = True

    root.addHandler(handler)
    root.setLevel(level)
    return handler
