"""Logging setup shared by the zeca commands.

Records go to stderr. Stdout carries only the classification lines, so
`zeca classify photos/ > results.txt` captures results without log noise.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_LEVEL_NAMES = ("debug", "info", "warning", "error", "critical")

# Levels reachable with -v/-q, quietest first; WARNING is the default
VERBOSITY_LADDER = (logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG)
DEFAULT_VERBOSITY = 1

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def add_logging_args(parser) -> None:
    """Register --log-level, -v/--verbose and -q/--quiet on a parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_NAMES,
        help="Log level, takes precedence over -v and -q",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="More log output: -v for each image, -vv for each stage",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Less log output: errors only",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Map the command line flags to a numeric log level.

    An explicit ``log_level`` wins. Otherwise each -v climbs one rung of
    VERBOSITY_LADDER and each -q descends one, clamped at both ends.
    """
    if log_level:
        return logging.getLevelName(log_level.upper())

    rung = DEFAULT_VERBOSITY + verbose - quiet
    rung = min(max(rung, 0), len(VERBOSITY_LADDER) - 1)
    return VERBOSITY_LADDER[rung]


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
    stream: TextIO | None = None,
) -> int:
    """Send log records to stderr (or ``stream``) and return the level used.

    Calling it again only changes the level of the existing handlers.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(handler)

    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)
    return level
