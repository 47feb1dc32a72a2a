"""Centralized logging configuration for postref."""

import logging

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once with a Rich handler; later calls only adjust the level."""
    root_logger = logging.getLogger()

    managed = [h for h in root_logger.handlers if getattr(h, "_postref_managed", False)]
    if not managed:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._postref_managed = True
        root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.captureWarnings(True)
