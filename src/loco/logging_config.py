"""
Logging setup for loco.

Records from every ``loco.*`` module go through the ``loco`` logger. The
terminal handler writes to stderr so JSON and CSV reports on stdout stay
machine-readable. An optional log file always records DEBUG detail, whatever
the terminal verbosity.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach handlers to the ``loco`` logger.

    Handlers installed by an earlier call are closed and replaced, so the CLI
    can be invoked repeatedly in one process.

    Args:
        verbosity: One of ``quiet``, ``normal`` or ``verbose``
        log_file: Append DEBUG-level records to this file as well

    Returns:
        The ``loco`` logger
    """
    if verbosity not in LEVELS:
        raise ValueError(f"Unknown verbosity: {verbosity}")
    level = LEVELS[verbosity]
    verbose = verbosity == "verbose"

    logger = logging.getLogger("loco")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    terminal = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        show_path=verbose,
    )
    terminal.setLevel(level)
    logger.addHandler(terminal)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``loco`` namespace (``helpers`` -> ``loco.helpers``)."""
    if name is None:
        return logging.getLogger("loco")
    if not name.startswith("loco"):
        name = f"loco.{name}"
    return logging.getLogger(name)
