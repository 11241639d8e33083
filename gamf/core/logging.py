"""
Logging utilities for the HTTP service.

Provides a consistent logging format and configuration. Request lines are
emitted by ``AccessLogMiddleware`` so the server's own access log is muted.
"""

import logging
import sys

_QUIET_LOGGERS = ("uvicorn.access",)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging"]
