"""Logging setup for the command-line interface."""

import logging

from rich.console import Console
from rich.logging import RichHandler

THIRD_PARTY_LOGGERS = ("PIL",)


def verbosity_to_level(verbosity: int) -> int:
    """Map the number of ``-v`` flags to a log level."""
    if verbosity <= 0:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0, console: Console | None = None) -> None:
    """Route log records through rich on stderr.

    0 flags logs INFO, 1 flag logs DEBUG for facecrop, 2 or more also let
    third-party libraries log at DEBUG.
    """
    level = verbosity_to_level(verbosity)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console or Console(stderr=True),
                show_path=verbosity > 0,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )

    third_party_level = logging.DEBUG if verbosity >= 2 else logging.WARNING
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
