"""Structured logging setup for the box scanner."""

from __future__ import annotations

import logging
import sys

# Transport libraries log every connection at DEBUG/INFO.
_NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(level: str = "INFO") -> None:
    """Configure structured logging with consistent format."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))
