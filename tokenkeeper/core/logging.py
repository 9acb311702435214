"""
Logging utilities for the token CLI.

Logs are written to stderr so stdout only ever carries command results.
"""

import logging
import sys


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stderr,
    )


__all__ = ["configure_logging"]
