"""Logging setup for the command line.

Library modules only create loggers; handlers are installed here, once,
by the CLI.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_configured = False


def configure_logging(level: str = "WARNING", console: Console | None = None) -> None:
    """Send log records through Rich to stderr."""
    global _configured

    root = logging.getLogger()
    root.setLevel(level)
    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    _configured = True
