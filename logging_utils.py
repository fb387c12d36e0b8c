"""Shared logging configuration helpers."""

from __future__ import annotations

import enum
import logging
import sys
from typing import Iterable

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

LOG_LEVEL_CHOICES: Iterable[str] = tuple(LOG_LEVELS.keys())


class DebugTopic(enum.Flag):
    """Pipeline stages whose detailed debug output is enabled.

    Passed explicitly into ``detect_text``; messages for a topic are emitted
    at DEBUG level only when the topic is part of the value.
    """

    NONE = 0
    COMPONENTS = 1
    CHAINS = 2
    TXT_ORIENT = 4
    TEXTREC = 8
    ALL = COMPONENTS | CHAINS | TXT_ORIENT | TEXTREC


DEBUG_TOPIC_CHOICES: Iterable[str] = ("components", "chains", "txt_orient", "textrec", "all", "none")


def parse_debug_topics(value: str | None) -> DebugTopic:
    """Parse a comma separated topic list such as ``"chains,textrec"``."""
    topics = DebugTopic.NONE
    if not value:
        return topics
    for name in value.split(","):
        name = name.strip().upper()
        if not name:
            continue
        try:
            topics |= DebugTopic[name]
        except KeyError:
            raise ValueError(
                f"Unknown debug topic {name.lower()!r}, expected one of {', '.join(DEBUG_TOPIC_CHOICES)}"
            ) from None
    return topics


def add_logging_args(parser) -> None:
    """Add standard logging options to an argparse parser."""
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVEL_CHOICES,
        help="Set log verbosity (debug, info, warning, error, critical)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (use -vv for more detail)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Reduce log verbosity (use -qq for errors only)",
    )
    parser.add_argument(
        "--debug-topics",
        default=None,
        help="Comma separated pipeline stages to trace at debug level "
             "(components, chains, txt_orient, textrec, all)",
    )


def resolve_log_level(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Resolve a numeric log level from explicit or modifier flags."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]

    offset = verbose - quiet
    if offset >= 1:
        return logging.DEBUG
    if offset == 0:
        return logging.INFO
    if offset == -1:
        return logging.WARNING
    return logging.ERROR


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
) -> int:
    """Configure root logging and return the active level."""
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()

    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return level

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )
    return level
