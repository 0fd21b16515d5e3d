"""Logging setup for the command line."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: Optional[str] = None, verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    if verbose:
        level = "DEBUG"

    logging.basicConfig(
        level=(level or "WARNING").upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
