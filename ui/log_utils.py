"""Shared logging utilities."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# stdout carries the response body, so everything else goes to stderr
console = Console(stderr=True)


def level_for(verbose: int) -> int:
    """Map the -verbose level to a logging level."""
    if verbose > 2:
        return logging.DEBUG
    if verbose > 0:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbose: int = 0) -> None:
    """Route log records to the stderr console."""
    logging.basicConfig(
        level=level_for(verbose),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose > 2, markup=False)],
        force=True,
    )
    # httpx logs every request at INFO; only show it when debugging
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose > 2 else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def log_pairs(title: str, pairs: dict[str, str]) -> None:
    """Log each key/value pair under a heading."""
    logger = logging.getLogger("gridcurl")
    logger.info(title)
    for key, value in pairs.items():
        logger.info("%s %s", key, value)


def print_error(message: str) -> None:
    """Print a fatal error on stderr."""
    console.print(f"[red][ERROR][/red] {escape(message)}", markup=True, highlight=False)
