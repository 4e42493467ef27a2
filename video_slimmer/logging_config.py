"""
Logging setup for the command line tool
"""

import logging

from rich.logging import RichHandler

from .rich_console import error_console


def configure_logging(verbose: bool = False):
    """Send log records through rich; WARNING and above unless verbose"""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root_logger.handlers.clear()

    handler = RichHandler(console=error_console, show_path=verbose, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root_logger.addHandler(handler)
