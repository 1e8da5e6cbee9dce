"""Shared utilities for platepack."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Rich console for pretty output
console = Console()


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Set up logging with Rich handler."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    return logging.getLogger("platepack")


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module."""
    return logging.getLogger(f"platepack.{name}")
